from dotenv import find_dotenv, load_dotenv

# Settings modules read the environment at import time
load_dotenv(find_dotenv())
