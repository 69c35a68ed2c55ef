from abc import ABC, abstractmethod
import time

import requests

from .config import AuditConfig


def is_success_status(status) -> bool:
    """True for 2xx/3xx. Anything non-numeric or non-positive is not a success."""
    if not isinstance(status, int) or isinstance(status, bool) or status <= 0:
        return False
    return 200 <= status < 400


def is_usable_status(status) -> bool:
    return isinstance(status, int) and not isinstance(status, bool) and status > 0


class SiteCheck(ABC):
    """
    Abstract base class for the auditor sweeps.
    Each sweep implements `run` and returns a list of result records.
    """

    title = "Check"
    unit = "issue(s)"

    def __init__(self, config: AuditConfig, session: requests.Session | None = None):
        self.check_name = self.__class__.__name__
        self.config = config
        self.headers = {
            'User-Agent': config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': config.accept_language,
        }
        self.session = session or requests.Session()
        self.session.headers.update(self.headers)

    @abstractmethod
    def run(self) -> list:
        """
        Runs the sweep against the configured site.

        Returns:
            list: Result records for this sweep. An empty list means nothing
                  was found, except for sweeps that report one record per
                  checked item (headers, sizes).
        """
        pass

    def failure_count(self, results: list) -> int:
        """Number of failing records, used for the console summary line."""
        return len(results)

    def debug(self, message: str):
        if self.config.debug:
            print(f"[{self.check_name}] {message}")

    def fetch_with_retry(self, url: str, method: str = "GET", timeout: float | None = None,
                         retries: int | None = None, **kwargs) -> requests.Response:
        """
        Performs a request, retrying transport failures only.

        HTTP error statuses come back as normal responses. Once the retry
        budget is spent the last `requests.RequestException` is raised.
        """
        timeout = self.config.request_timeout if timeout is None else timeout
        retries = self.config.http_retries if retries is None else retries
        kwargs.setdefault("allow_redirects", True)
        attempt = 0
        while True:
            try:
                return self.session.request(method=method, url=url, timeout=timeout, **kwargs)
            except requests.exceptions.RequestException as e:
                if attempt >= retries:
                    self.debug(f"{method} {url} failed after {attempt + 1} attempt(s): {e}")
                    raise
                attempt += 1
                self.debug(f"{method} {url} failed ({e}), retry {attempt}/{retries}")
                time.sleep(self.config.retry_backoff)

    def fetch_text(self, url: str) -> str:
        resp = self.fetch_with_retry(url, method="GET")
        return resp.text

    def head(self, url: str, **kwargs):
        return self.fetch_with_retry(url, method="HEAD", **kwargs)

    def get(self, url: str, **kwargs):
        return self.fetch_with_retry(url, method="GET", **kwargs)
