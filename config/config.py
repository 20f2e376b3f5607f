import os
import urllib.parse


def build_database_uri(db_config: dict) -> str:
    """SQLAlchemy URI for a mysql-connector style dict, unless DATABASE_URL is set."""
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    # Encode the password so characters like '@' survive inside the URI
    encoded_password = urllib.parse.quote_plus(str(db_config.get("password", "")))
    return (
        f"mysql+mysqlconnector://{db_config['user']}:{encoded_password}"
        f"@{db_config['host']}:{int(db_config.get('port', 3306))}/{db_config['database']}"
    )
