import requests


DEFAULT_USER_AGENT = "indextank-python/0.1.0"


def setup_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
  """
  Build the HTTP session shared by every request of a document.

  Credentials in the index URL (``http://:KEY@host/...``) are picked up by
  requests when each request is prepared.
  """
  session = requests.Session()
  session.headers.update({
      "Accept": "application/json",
      "Content-Type": "application/json",
      "User-Agent": user_agent,
  })
  return session
