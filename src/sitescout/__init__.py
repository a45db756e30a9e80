from dotenv import load_dotenv

# .env 파일에서 환경 변수 로드 (하위 모듈의 os.getenv보다 먼저)
load_dotenv()
