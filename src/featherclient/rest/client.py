"""REST client for Feathers-style backends."""

from collections.abc import Iterable, Mapping
from typing import Any

import requests

from featherclient.auth.interfaces import TokenStore
from featherclient.config import ClientConfig
from featherclient.core.models import FileUpload, RequestDescriptor
from featherclient.rest import errors, form_data
from featherclient.rest.auth import DEFAULT_PROBE_SERVICE, AuthenticationManager
from featherclient.rest.pipeline import LogHook, RequestPipeline

Files = Iterable[FileUpload | Mapping] | None


class RestClient:
    """Authenticated CRUD access to the services of one backend.

    Every operation builds a :class:`RequestDescriptor`, dispatches it
    through the :class:`RequestPipeline`, and returns the decoded JSON body
    exactly as the server sent it.  All failures surface as
    :class:`~featherclient.core.exceptions.FeatherError`; nothing is
    retried.

    A response with an empty (or ``null``) body is treated as a server
    contract violation and raises ``SERVER_ERROR``.

    Token storage is delegated to the injected
    :class:`~featherclient.auth.interfaces.TokenStore`; the client itself
    keeps no session state.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        session: requests.Session | None = None,
        extra_headers: dict[str, str] | None = None,
        timeout: float | None = None,
        debug: bool = False,
        log_hook: LogHook | None = None,
        client_tag: str = "rest",
    ):
        """Initialise the client.

        Args:
            base_url: Root URL of the backend.
            token_store: Where the access token is read from and saved to.
            session: Optional transport session to reuse.
            extra_headers: Headers sent with every request.
            timeout: Per-request timeout in seconds.
            debug: Emit request/response events through *log_hook* (or the
                ``featherclient`` logger).
            log_hook: Callable receiving ``(event, fields)``.
            client_tag: Key under which the token is stored.
        """
        self.pipeline = RequestPipeline(
            base_url,
            token_store,
            session=session,
            extra_headers=extra_headers,
            timeout=timeout,
            debug=debug,
            log_hook=log_hook,
            client_tag=client_tag,
        )
        self.auth = AuthenticationManager(self.pipeline)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        token_store: TokenStore | None = None,
        session: requests.Session | None = None,
        log_hook: LogHook | None = None,
    ) -> "RestClient":
        """Build a client from a :class:`ClientConfig`.

        When *token_store* is ``None`` a
        :class:`~featherclient.auth.credentials.JsonFileTokenStore` at
        ``config.token_path`` is used.
        """
        if token_store is None:
            from featherclient.auth.credentials import JsonFileTokenStore

            token_store = JsonFileTokenStore(config.token_path)
        return cls(
            config.base_url,
            token_store,
            session=session,
            extra_headers=config.extra_headers,
            timeout=config.timeout,
            debug=config.debug,
            log_hook=log_hook,
            client_tag=config.client_tag,
        )

    @property
    def token_store(self) -> TokenStore:
        """The store the access token is read from and saved to."""
        return self.pipeline.token_store

    # -------------------------
    # Authentication
    # -------------------------

    def authenticate(
        self,
        username: str,
        password: str,
        strategy: str = "local",
        username_field: str = "email",
    ) -> dict:
        """Log in and store the access token.  See
        :meth:`AuthenticationManager.authenticate`."""
        return self.auth.authenticate(
            username,
            password,
            strategy=strategy,
            username_field=username_field,
        )

    def re_authenticate(self, service: str = DEFAULT_PROBE_SERVICE) -> bool:
        """Probe the stored token.  See
        :meth:`AuthenticationManager.re_authenticate`."""
        return self.auth.re_authenticate(service)

    # -------------------------
    # Service methods
    # -------------------------

    def find(
        self, service: str, query: Mapping[str, Any] | None = None
    ) -> Any:
        """``GET /{service}``

        Retrieve every resource of *service* matching *query*, e.g.
        ``{"$limit": 10, "userId": 1}``.

        Returns:
            The server payload, typically ``{total, limit, skip, data}``.
        """
        return self._execute(
            RequestDescriptor(method="GET", service=service, query=query or {})
        )

    def get(self, service: str, object_id: str | int) -> Any:
        """``GET /{service}/{object_id}``"""
        return self._execute(
            RequestDescriptor(
                method="GET", service=service, object_id=str(object_id)
            )
        )

    def create(
        self,
        service: str,
        data: Mapping[str, Any],
        contains_file: bool = False,
        file_field_name: str = form_data.DEFAULT_FILE_FIELD,
        files: Files = None,
    ) -> Any:
        """``POST /{service}``

        Create a resource from *data*.  With *contains_file*, *data* and
        *files* are sent as one multipart body, every file under
        *file_field_name*; the body is built before any network call.

        Args:
            service: Target service.
            data: Resource fields.
            contains_file: Send a multipart body instead of JSON.
            file_field_name: Form field carrying the file(s).
            files: :class:`FileUpload` entries, for example
                ``[FileUpload("/data/logo.png", "logo.png")]``.
        """
        return self._execute(
            self._descriptor(
                "POST", service, None, data, contains_file, file_field_name, files
            )
        )

    def update(
        self,
        service: str,
        object_id: str | int,
        data: Mapping[str, Any],
        contains_file: bool = False,
        file_field_name: str = form_data.DEFAULT_FILE_FIELD,
        files: Files = None,
    ) -> Any:
        """``PUT /{service}/{object_id}``

        Completely replace a resource.  With *contains_file* the request is
        sent as ``PATCH`` with a multipart body.
        """
        # Multipart replacement goes out as PATCH; only the JSON path uses PUT.
        method = "PATCH" if contains_file else "PUT"
        return self._execute(
            self._descriptor(
                method,
                service,
                str(object_id),
                data,
                contains_file,
                file_field_name,
                files,
            )
        )

    def patch(
        self,
        service: str,
        object_id: str | int,
        data: Mapping[str, Any],
        contains_file: bool = False,
        file_field_name: str = form_data.DEFAULT_FILE_FIELD,
        files: Files = None,
    ) -> Any:
        """``PATCH /{service}/{object_id}``

        Merge *data* into an existing resource.
        """
        return self._execute(
            self._descriptor(
                "PATCH",
                service,
                str(object_id),
                data,
                contains_file,
                file_field_name,
                files,
            )
        )

    def remove(self, service: str, object_id: str | int) -> Any:
        """``DELETE /{service}/{object_id}``"""
        return self._execute(
            RequestDescriptor(
                method="DELETE", service=service, object_id=str(object_id)
            )
        )

    def service(self, name: str):
        """Return a :class:`~featherclient.services.service.Service` bound
        to *name*."""
        from featherclient.services.service import Service

        return Service(self, name)

    # -------------------------
    # Lifecycle
    # -------------------------

    def close(self) -> None:
        """Release the transport session if the client created it."""
        self.pipeline.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------
    # Internal helpers
    # -------------------------

    @staticmethod
    def _descriptor(
        method: str,
        service: str,
        object_id: str | None,
        data: Mapping[str, Any],
        contains_file: bool,
        file_field_name: str,
        files: Files,
    ) -> RequestDescriptor:
        """Build a write descriptor, assembling the multipart body if needed.

        Raises:
            FeatherError: ``FORM_DATA_ERROR`` from :func:`form_data.build`.
        """
        if contains_file:
            return RequestDescriptor(
                method=method,
                service=service,
                object_id=object_id,
                multipart=form_data.build(data, file_field_name, files),
            )
        return RequestDescriptor(
            method=method,
            service=service,
            object_id=object_id,
            body=dict(data),
        )

    def _execute(self, descriptor: RequestDescriptor) -> Any:
        try:
            response = self.pipeline.send(descriptor)
        except requests.RequestException as e:
            raise errors.classify(e) from e
        return self.pipeline.decode(response)
