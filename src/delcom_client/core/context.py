"""
Application wiring for Delcom Client.

`AppContext` builds one session, one API client and the view-models that
share them, so that no component reaches for process-wide state.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Optional
import logging

import httpx

from ..config.settings import DelcomSettings
from ..media.image_file import materialize_image
from ..storage.preferences import Preferences
from ..viewmodels import AuthViewModel, PostEditor, PostsViewModel, ProfileViewModel
from .client import DelcomApiClient, Session, create_api_client
from .connectivity import AlwaysOnline, ConnectivityMonitor, SocketConnectivity

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything one run of the client needs."""
    settings: DelcomSettings
    session: Session
    client: DelcomApiClient
    preferences: Preferences
    connectivity: ConnectivityMonitor
    auth: AuthViewModel = field(init=False)
    profile: ProfileViewModel = field(init=False)
    posts: PostsViewModel = field(init=False)
    editor: PostEditor = field(init=False)

    def __post_init__(self):
        self.auth = AuthViewModel(self.client, self.session, self.connectivity)
        self.profile = ProfileViewModel(self.client, self.session, self.preferences, self.connectivity)
        self.posts = PostsViewModel(self.client, self.session, self.connectivity)
        self.editor = PostEditor(
            self.posts,
            materialize=partial(
                materialize_image,
                size_px=self.settings.profile_image_size,
                cache_dir=self.settings.cache_dir,
            ),
        )

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()


def create_app_context(
    settings: DelcomSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    connectivity: Optional[ConnectivityMonitor] = None,
) -> AppContext:
    """Build an `AppContext` from settings."""
    settings.ensure_directories()
    session = Session()
    client = create_api_client(
        session,
        settings.base_url,
        timeout=settings.timeout,
        log_bodies=settings.log_http_bodies,
        transport=transport,
    )
    preferences = Preferences.for_namespace(settings.data_dir, settings.preferences_namespace)

    if connectivity is None:
        connectivity = SocketConnectivity(settings.base_url) if settings.check_connectivity else AlwaysOnline()

    logger.debug(f"Created app context for {settings.base_url}")
    return AppContext(
        settings=settings,
        session=session,
        client=client,
        preferences=preferences,
        connectivity=connectivity,
    )
