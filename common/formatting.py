from common.database import utcnow


def format_timestamp(value):
    """Human readable submission time used in notifications."""
    value = value or utcnow()
    return value.strftime('%Y-%m-%d %H:%M:%S UTC')
