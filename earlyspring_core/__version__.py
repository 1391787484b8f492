"""Version information for earlyspring-core."""

__version__ = "0.1.0"
__version_info__ = tuple(int(i) for i in __version__.split(".") if i.isdigit())

# Package metadata
__title__ = "earlyspring-core"
__description__ = "Alarm scheduling and wake-up lifecycle engine for the EarlySpring alarm clock"
__author__ = "EarlySpring Team"
__author_email__ = "team@earlyspring.app"
__license__ = "MIT"
__url__ = "https://github.com/earlyspring/earlyspring-core"
