import datetime


def get_utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def get_utc_iso_now() -> str:
    return get_utc_now().isoformat()


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Attach UTC to naive datetimes read back from databases without tz support."""
    return value.replace(tzinfo=datetime.UTC) if value.tzinfo is None else value


def to_epoch_ms(value: datetime.datetime) -> int:
    return int(as_utc(value).timestamp() * 1000)
