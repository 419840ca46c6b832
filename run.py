"""
Metrofare 웹앱 진입점
실행: python run.py
접속: http://localhost:8000/docs
"""
import os
import sys
import webbrowser
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def check_data():
    """역 데이터 파일 확인"""
    stations_path = Path(os.getenv("STATIONS_PATH", "data/stations.json"))
    if not stations_path.exists():
        print(f"[ERROR] 역 데이터 파일이 없습니다: {stations_path}")
        print("CSV 변환기로 stations.json을 먼저 생성하세요.")
        sys.exit(1)


def main():
    """메인 실행 함수"""
    print("=" * 60)
    print("Metrofare - 택시비 예산 내 지하철역 추천")
    print("=" * 60)
    print()

    # 환경 변수 로드 (.env)
    load_dotenv()
    check_data()

    if not os.getenv("KAKAO_REST_API_KEY"):
        print("[WARN]  KAKAO_REST_API_KEY가 없습니다. 지역 판별 없이(할증 미적용) 동작합니다.")
        print()

    # 서버 설정
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "True").lower() == "true"

    url = f"http://{host}:{port}"

    print(f"[*] 서버 주소: {url}")
    print(f"[*] 지역 판별 방식: {os.getenv('REGION_STRATEGY', 'geocode')}")
    print(f"[*] 자동 재시작: {'활성화' if reload else '비활성화'}")
    print()
    print("서버를 중지하려면 Ctrl+C를 누르세요.")
    print("=" * 60)
    print()

    if os.getenv("OPEN_BROWSER", "False").lower() == "true":
        try:
            webbrowser.open(f"{url}/docs")
        except webbrowser.Error:
            pass

    try:
        uvicorn.run(
            "api.app:app",
            host=host,
            port=port,
            reload=reload,
            reload_dirs=["api", "src"],
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )
    except KeyboardInterrupt:
        print("\n\n[*] 서버를 종료합니다.")
    except Exception as e:
        print(f"\n[ERROR] 서버 실행 중 오류 발생: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
