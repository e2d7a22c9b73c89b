"""Host environment signals consumed read-only by the resilience layer."""

from collections.abc import Callable


class HostEnvironment:
    """Online/offline signal plus the identifiers attached to error records."""

    def __init__(
        self,
        url: str,
        user_agent: str,
        connectivity: Callable[[], bool] | None = None,
    ):
        """Initialize host environment.

        Args:
            url: Location reported with each error (provider endpoint or page)
            user_agent: Client identifier reported with each error
            connectivity: Returns True while the host is online
        """
        self.url = url
        self.user_agent = user_agent
        self._connectivity = connectivity or (lambda: True)

    def is_online(self) -> bool:
        return bool(self._connectivity())


class StaticEnvironment(HostEnvironment):
    """Environment whose online flag is toggled explicitly."""

    def __init__(
        self,
        online: bool = True,
        url: str = "about:blank",
        user_agent: str = "sample-discovery/test",
    ):
        super().__init__(url, user_agent, connectivity=lambda: self.online)
        self.online = online
