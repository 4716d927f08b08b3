# Common utilities
from qrsign.common.config import Config as Config
from qrsign.common.logging_utils import setup_logger as setup_logger
from qrsign.common.mixins import Configurable as Configurable

__all__ = ["Config", "Configurable", "setup_logger"]
