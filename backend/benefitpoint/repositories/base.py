import logging
from contextlib import contextmanager

from benefitpoint.core.exceptions import BenefitPointError

logger = logging.getLogger(__name__)


@contextmanager
def repo_call(context: str):
    """Log a service failure with repository context, then let it propagate."""
    try:
        yield
    except BenefitPointError as e:
        logger.error("Failed %s: %s", context, e.message)
        raise
