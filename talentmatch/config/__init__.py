from .settings import Settings, get_settings
from .logging import setup_logging
from .supabase import get_supabase_client
from .utils import get_table_name

__all__ = [
    'Settings',
    'get_settings',
    'setup_logging',
    'get_supabase_client',
    'get_table_name'
]
