import uvicorn

from musichub.server.core.config import settings


def main():
    uvicorn.run(
        "musichub.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
    )


if __name__ == "__main__":
    main()
