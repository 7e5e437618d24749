EXTRACT_LOCATION_PROMPT = "Extract the location mentioned in the following article: {description}"
EXTRACT_LOCATION_MAX_TOKENS = 50

EXTRACT_CONTENT_PROMPT = "Extract the main content of the article from this description: {description}"
EXTRACT_CONTENT_MAX_TOKENS = 2000

SUMMARIZE_PROMPT = "Summarize the following article: {text}"
SUMMARIZE_MAX_TOKENS = 100
