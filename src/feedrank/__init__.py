"""Feed ranking and diversity sampling service."""

from dotenv import load_dotenv

# Load .env before any module reads API_KEY or ELASTICSEARCH_* from
# os.environ at call time.
load_dotenv()
