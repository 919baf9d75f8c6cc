from __future__ import annotations

import json
import logging
import typing as t
import urllib.error
import urllib.parse
import urllib.request

from kartografi.errors import UpstreamFetchError

JsonDict = dict[str, t.Any]

log = logging.getLogger(__name__)

BULK_FIELDS = "name,capital,languages,flags,cca3"


class RestCountriesClient:
    def __init__(
        self,
        base_url: str = "https://restcountries.com/v3.1",
        timeout_s: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> t.Any:
        url = self.base_url + path
        if params:
            url += "?" + urllib.parse.urlencode(params, safe=",")
        req = urllib.request.Request(url, method="GET", headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            try:
                body = e.read().decode("utf-8")
            except Exception:
                body = ""
            log.warning("Upstream %s failed with status %s", url, e.code)
            raise UpstreamFetchError(f"Request failed ({e.code}): {body or e.reason}") from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            log.warning("Upstream %s unreachable: %s", url, e)
            raise UpstreamFetchError(f"Request to {url} failed: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise UpstreamFetchError(f"Upstream returned invalid JSON: {raw[:500]}") from e

    def all_countries(self, fields: str = BULK_FIELDS) -> list[JsonDict]:
        data = self._get_json("/all", {"fields": fields})
        if not isinstance(data, list):
            raise UpstreamFetchError("Upstream country listing is not a list")
        return [c for c in data if isinstance(c, dict)]

    def by_language(self, code: str) -> list[JsonDict]:
        data = self._get_json(f"/lang/{urllib.parse.quote(code, safe='')}")
        if not isinstance(data, list):
            raise UpstreamFetchError(f"Upstream language lookup for {code!r} is not a list")
        return [c for c in data if isinstance(c, dict)]

    def by_code(self, cca3: str, fields: str) -> JsonDict:
        data = self._get_json(f"/alpha/{urllib.parse.quote(cca3, safe='')}", {"fields": fields})
        # /alpha answers with a bare object when fields are given, a list otherwise
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            raise UpstreamFetchError(f"No country returned for code {cca3!r}")
        return data
