import logging

from fastapi import (
    FastAPI,
)
from fastapi.middleware.cors import CORSMiddleware

from converter.routers import get_routers
from converter.shared import Logger, load_config

logger = Logger(__name__, level=logging.DEBUG).get_logger()

config = load_config()


# ================================================================================
#       FastAPI Setup
# ================================================================================
app = FastAPI(title="Client Record Converter")

for router in get_routers():
    app.include_router(router)

origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ================================================================================
#       Command Line
# ================================================================================
def welcome():
    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    logger.info("Starting client record converter on %s:%d", config.network.host, config.network.port)


def main(argv=None):
    welcome()

    import uvicorn

    uvicorn.run(
        "converter.main:app",
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    main()
