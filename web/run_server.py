"""
웹 서버 실행 스크립트
백엔드 API 서버를 시작합니다.
"""

import uvicorn


def main(host: str = "0.0.0.0", port: int = 8000):
    print("=" * 60)
    print("  CPU 스케줄링 커널 시뮬레이터 - 웹 서버")
    print("=" * 60)
    print()
    print(f"API 문서: http://localhost:{port}/docs")
    print("종료하려면 Ctrl+C를 누르세요.")
    print("-" * 60)

    uvicorn.run("web.backend.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
