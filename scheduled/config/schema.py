"""Settings schema for scheduled."""

from pydantic import Field
from pydantic_settings import BaseSettings


class SchedulerSettings(BaseSettings):
    """Process-level scheduler settings.

    Values come from keyword arguments, a JSON file (see ``load_settings``)
    or ``SCHEDULED_*`` environment variables.
    """

    model_config = {
        "env_prefix": "SCHEDULED_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    max_workers: int = Field(default=8, gt=0)
    """Size of the worker pool shared by all jobs"""

    poll_interval_s: float = Field(default=1.0, gt=0)
    """How often predicate jobs are polled"""

    min_cron_delay_s: int = Field(default=1, ge=1)
    """Lower bound on the delay before a cron job's next run"""

    timezone: str = ""
    """Timezone for cron matching (e.g. 'Europe/Berlin'); empty means local time"""

    log_level: str = "INFO"
    log_file: str = ""
