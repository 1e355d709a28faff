"""Three jobs, one of each kind. Stop with Ctrl+C."""

from datetime import datetime

import scheduled


scheduled.every(5, lambda: print("Running", datetime.now()))


def two_hours_from_last_run(job: scheduled.JobState) -> bool:
    if job.last_run is None:
        return True
    return (datetime.now().astimezone() - job.last_run).total_seconds() >= 60 * 60 * 2


@scheduled.every(two_hours_from_last_run)
def update() -> None:
    print("Updating")


@scheduled.every("* * * * *", name="cron")
def cron() -> None:
    scheduled.current_context().logger.info("Cron")


scheduled.wait()
