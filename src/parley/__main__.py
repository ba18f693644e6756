"""Parley MCPサーバーのコマンドラインエントリポイント。"""

if __name__ == "__main__":
    import uvicorn

    from parley.config import ServerConfig
    from parley.logging_setup import setup_console_logging
    from parley.server import create_app

    config = ServerConfig()
    setup_console_logging(config.log_level.upper())
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port)
