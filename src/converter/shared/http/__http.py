from contextlib import contextmanager

from fastapi import HTTPException

from converter.core.errors import ConversionError
from converter.shared import Logger

__all__ = ["conversion_error_handler"]

logger = Logger(__name__).get_logger()


@contextmanager
def conversion_error_handler(stacklevel=1):
    # Go 3 levels up to escape @contextmanager methods and current function
    stack_level = 2 + stacklevel
    kw = {"stacklevel": stack_level}
    try:
        yield

    except HTTPException:
        raise

    except ConversionError as e:
        logger.warning("Rejected conversion request: %s", e, **kw)
        raise HTTPException(status_code=400, detail=str(e)) from e

    except Exception as e:
        logger.error("Failed to process request: %s", e, **kw)
        raise HTTPException(
            status_code=500, detail=f"Error processing file: {e}"
        ) from e
