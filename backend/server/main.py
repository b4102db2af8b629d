import logging

import uvicorn
from fastapi import FastAPI

from config.settings import SERVER_LOG_LEVEL, UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api.rest.errors import register_exception_handlers
from server.api_router import api_router

logger = logging.getLogger(__name__)

# 初始化 FastAPI 应用
app = FastAPI(title="Cinelog", description="观影清单、观影日历与电影评论后端API")

register_exception_handlers(app)

# 添加路由
app.include_router(api_router)


@app.on_event("shutdown")
async def shutdown_event():
    """应用关闭时清理资源（连接池 / HTTP 会话）"""
    await shutdown_dependencies()
    logger.info("cinelog shutdown complete")


# 启动服务器
if __name__ == "__main__":
    logging.basicConfig(level=SERVER_LOG_LEVEL.upper())
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
