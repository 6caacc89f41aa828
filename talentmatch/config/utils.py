from .settings import Settings

def get_table_name(table_name: str, settings: Settings) -> str:
    """
    Get the physical table name for a base table name.

    Args:
        table_name: Base table name
        settings: Application settings carrying the optional table suffix

    Returns:
        {table_name}{settings.table_suffix}, e.g. "candidates_dev" with TABLE_SUFFIX=_dev
    """
    return f"{table_name}{settings.table_suffix}"
