from contextlib import contextmanager

from fastapi import HTTPException, status

from core.errors import InteractionStateError, NotFoundError, ParseError, ValidationError
from core.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def http_errors():
    """Translate engine errors raised inside a route into HTTP responses."""
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        logger.info(f"Rejected: {e.reason}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"reason": e.reason, "message": str(e)},
        )
    except ParseError as e:
        logger.warning(f"Parse error: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InteractionStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
