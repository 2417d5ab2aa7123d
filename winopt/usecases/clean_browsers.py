from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from winopt.domain.ports import BrowserCleanerPort, CancelToken, UseCaseError
from winopt.usecases.error_mapping import map_collaborator_error

# Fixed policy: cookies and history go, autofill data stays.
INCLUDE_COOKIES = True
INCLUDE_HISTORY = True
INCLUDE_AUTOFILL = False


@dataclass
class CleanBrowsers:
    browser_cleaner: BrowserCleanerPort

    async def __call__(self, cancel: Optional[CancelToken] = None) -> int:
        token = cancel or CancelToken()
        token.raise_if_cancelled()
        try:
            reclaimed = await self.browser_cleaner.clean_browsers(
                include_cookies=INCLUDE_COOKIES,
                include_history=INCLUDE_HISTORY,
                include_autofill=INCLUDE_AUTOFILL,
                cancel=token,
            )
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="BROWSER_CLEAN_FAILED") from exc
        token.raise_if_cancelled()
        return max(0, int(reclaimed or 0))
