import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the backend directory or the project root
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

DEFAULT_PARTICIPANTS = "Theo:TH,Lillian:LL,Ruben:RB,Noreen:NR,Casper:CS,Swenne:SW,Anneke:AJ,Michael:MG,Marten:MM"


def parse_participants(value):
    """Parse "Name:XX,Other" into an ordered {name: initials} mapping."""
    roster = {}
    for entry in value.split(','):
        name, _, initials = entry.partition(':')
        name = name.strip()
        if not name:
            continue
        roster[name] = initials.strip() or name[:2].upper()
    return roster


class Config:
    PARTICIPANTS = parse_participants(os.environ.get('PARTICIPANTS') or DEFAULT_PARTICIPANTS)
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', '€')
    RECENT_EXPENSES_LIMIT = int(os.environ.get('RECENT_EXPENSES_LIMIT', 3))

    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    PORT = int(os.environ.get('PORT', 5000))
    DEBUG = os.environ.get('FLASK_DEBUG', '').lower() in ('1', 'true', 'yes')
