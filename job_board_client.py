# job_board_client.py
# Job-posting collaborator: the port the skill extractor talks to, plus an Adzuna implementation.

import os
from typing import List, Optional, Protocol

import httpx
from dotenv import load_dotenv

from career_errors import ConfigurationError
from career_models import JobPosting

# Load environment variables
load_dotenv()

ADZUNA_COUNTRY = os.getenv("ADZUNA_COUNTRY", "us")
ADZUNA_WHERE = os.getenv("ADZUNA_WHERE", "")
ADZUNA_RESULTS_PER_PAGE = int(os.getenv("ADZUNA_RESULTS_PER_PAGE", "50"))
ADZUNA_MAX_PAGES = int(os.getenv("ADZUNA_MAX_PAGES", "2"))

BASE_URL = "https://api.adzuna.com/v1/api/jobs/{country}/search/{page}"
HEADERS = {"User-Agent": "skill-gap-advisor/1.0"}


class JobPostingPort(Protocol):
    async def search(self, query: str, filters: dict) -> List[JobPosting]:
        ...


class AdzunaJobBoardClient:
    """
    JobPostingPort backed by the Adzuna job search API.

    filters:
        industries: list of industry keywords; any of them may appear in a posting ("what_or").
                    Empty or missing means no industry restriction.
        where: location override (defaults to ADZUNA_WHERE)
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        country: Optional[str] = None,
        max_pages: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id or os.getenv("ADZUNA_APP_ID")
        self.app_key = app_key or os.getenv("ADZUNA_APP_KEY")
        if not self.app_id or not self.app_key:
            raise ConfigurationError("Set ADZUNA_APP_ID and ADZUNA_APP_KEY in .env")
        self.country = country or ADZUNA_COUNTRY
        self.max_pages = ADZUNA_MAX_PAGES if max_pages is None else max_pages
        self._transport = transport

    def _params(self, query: str, filters: dict) -> dict:
        params = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "what": query,
            "results_per_page": ADZUNA_RESULTS_PER_PAGE,
            "content-type": "application/json",
        }
        industries = [i.strip() for i in (filters.get("industries") or []) if i and i.strip()]
        if industries:
            params["what_or"] = " ".join(industries)
        where = filters.get("where") or ADZUNA_WHERE
        if where:
            params["where"] = where
        return params

    async def search(self, query: str, filters: dict) -> List[JobPosting]:
        params = self._params(query, filters or {})
        postings: List[JobPosting] = []
        seen_ids = set()

        async with httpx.AsyncClient(headers=HEADERS, transport=self._transport) as client:
            for page in range(1, self.max_pages + 1):
                url = BASE_URL.format(country=self.country, page=page)
                response = await client.get(url, params=params)
                response.raise_for_status()
                results = response.json().get("results", [])
                if not results:
                    break

                for job in results:
                    job_id = str(job.get("id") or "")
                    if job_id and job_id in seen_ids:
                        continue
                    seen_ids.add(job_id)
                    postings.append(
                        JobPosting(
                            title=job.get("title") or "",
                            description=job.get("description") or "",
                        )
                    )
        return postings
