"""Riot API endpoint selection and URL construction."""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .constants import GLOBAL_ENDPOINT, REGIONAL_ENDPOINT, Region
from .errors import ArgumentCountError, InvalidTemplateError
from .models import ApiMethod, RequestDescriptor, stringify_arg

Args = Union["ArgMap", Mapping[str, Any], Iterable[Tuple[str, Any]]]


class ArgMap:
    """
    Ordered path or query arguments.

    Keys are unique; adding an existing key replaces its value but keeps its
    position. Values are stored as strings.
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[str, Any]]] = None):
        self._args: Dict[str, str] = {}
        for key, value in pairs or ():
            self.add(key, value)

    def add(self, key: str, value: Any) -> "ArgMap":
        """Add or replace an argument. Returns self for chaining."""
        self._args[str(key)] = stringify_arg(value)
        return self

    def add_if(self, key: str, value: Any) -> "ArgMap":
        """Add an argument only when the value is not None."""
        if value is not None:
            self.add(key, value)
        return self

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._args.get(key, default)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._args.items())

    def __getitem__(self, key: str) -> str:
        return self._args[key]

    def __contains__(self, key: object) -> bool:
        return key in self._args

    def __iter__(self) -> Iterator[str]:
        return iter(self._args)

    def __len__(self) -> int:
        return len(self._args)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArgMap):
            return self.items() == other.items()
        return NotImplemented

    def __repr__(self) -> str:
        return f"ArgMap({self.items()!r})"


def create_arg_map(*args: Any) -> ArgMap:
    """
    Create an argument map from a flat list of pairs.

    Example: create_arg_map("summonerId", 123, "champion", "Ahri")

    Raises:
        ArgumentCountError: If the arguments are not in pairs
    """
    if len(args) % 2:
        raise ArgumentCountError(
            f"Arguments must be in pairs, got {len(args)} items"
        )
    return ArgMap(zip(args[0::2], args[1::2]))


def _lookup(path_args: Args) -> Dict[str, str]:
    if isinstance(path_args, ArgMap):
        return dict(path_args.items())
    if hasattr(path_args, "items"):
        return {str(k): stringify_arg(v) for k, v in path_args.items()}
    return {str(k): stringify_arg(v) for k, v in path_args}


def substitute_path_args(operation: str, path_args: Optional[Args]) -> str:
    """
    Replace every ``{key}`` in the operation with its path argument.

    The template is scanned left to right; scanning resumes after each
    inserted value, so values containing braces are left alone. Without path
    arguments the template is returned unchanged.

    Raises:
        InvalidTemplateError: If a placeholder is unterminated or has no value
    """
    if path_args is None or "{" not in operation:
        return operation

    values = _lookup(path_args)
    parts: List[str] = []
    pos = 0
    while True:
        start = operation.find("{", pos)
        if start < 0:
            parts.append(operation[pos:])
            break
        end = operation.find("}", start + 1)
        if end < 0:
            raise InvalidTemplateError(
                f"Unterminated placeholder in operation template: {operation!r}"
            )
        key = operation[start + 1 : end]
        if key not in values:
            raise InvalidTemplateError(
                f"No path argument for placeholder {{{key}}} in {operation!r}"
            )
        parts.append(operation[pos:start])
        parts.append(values[key])
        pos = end + 1

    return "".join(parts)


def build_query_string(query_args: Optional[Args]) -> str:
    """Join query arguments as ``key=value`` pairs in insertion order."""
    if not query_args:
        return ""
    if isinstance(query_args, ArgMap):
        items = query_args.items()
    elif hasattr(query_args, "items"):
        items = [(k, stringify_arg(v)) for k, v in query_args.items()]
    else:
        items = [(k, stringify_arg(v)) for k, v in query_args]
    return "&".join(f"{key}={value}" for key, value in items)


def build_url(
    endpoint: str,
    header: Optional[str],
    method_name: Optional[str],
    version: Optional[str],
    region: Optional[Region],
    operation: Optional[str],
    path_args: Optional[Args],
    query_args: Optional[Args],
    api_key: Optional[str],
    use_secure: bool = True,
) -> str:
    """
    Build a fully-qualified request URL.

    Layout: ``{scheme}://{endpoint}/{header}/{region}/v{version}/{method}/{operation}``
    with absent parts skipped. Secure URLs carry the query arguments and the
    API key (always last, omitted when no key is set); insecure URLs carry no
    query string at all.
    """
    segments: List[str] = []
    if header:
        segments.append(header.strip("/"))
    if region is not None:
        segments.append(stringify_arg(region))
    if version:
        segments.append(f"v{version}")
    if method_name:
        segments.append(method_name)
    if operation:
        segments.append(substitute_path_args(operation, path_args))

    scheme = "https" if use_secure else "http"
    url = f"{scheme}://{endpoint}"
    if segments:
        url = f"{url}/{'/'.join(segments)}"

    if not use_secure:
        return url

    query = build_query_string(query_args)
    if api_key:
        key_param = f"api_key={api_key}"
        query = f"{query}&{key_param}" if query else key_param
    return f"{url}?{query}" if query else url


def redact_api_key(url: str) -> str:
    """Strip the API key value from a URL for logging and errors."""
    marker = "api_key="
    idx = url.find(marker)
    if idx < 0:
        return url
    end = url.find("&", idx)
    tail = url[end:] if end >= 0 else ""
    return f"{url[: idx + len(marker)]}[REDACTED]{tail}"


class RiotAPIEndpoints:
    """Endpoint selection and descriptor-level URL building."""

    def __init__(
        self,
        regional_endpoint: str = REGIONAL_ENDPOINT,
        global_endpoint: str = GLOBAL_ENDPOINT,
    ):
        """
        Initialize endpoint configuration.

        Args:
            regional_endpoint: Host template with a ``{region}`` placeholder
            global_endpoint: Host used for region-independent calls
        """
        self.regional_endpoint = regional_endpoint
        self.global_endpoint = global_endpoint

    def get_base_url(
        self,
        method: ApiMethod,
        region: Optional[Region] = None,
        use_global: bool = False,
    ) -> str:
        """Get the host a method's request goes to."""
        if method.custom_endpoint:
            return method.custom_endpoint
        if use_global:
            return self.global_endpoint
        if region is None:
            raise InvalidTemplateError(
                f"Method {method.display_name} needs a region for its regional endpoint"
            )
        return self.regional_endpoint.format(region=stringify_arg(region))

    def build(self, descriptor: RequestDescriptor, api_key: Optional[str]) -> str:
        """Resolve a request descriptor into its final URL."""
        method = descriptor.method
        return build_url(
            endpoint=self.get_base_url(method, descriptor.region, descriptor.use_global),
            header=method.header,
            method_name=method.name,
            version=method.version,
            region=descriptor.region,
            operation=descriptor.operation,
            path_args=descriptor.path_args,
            query_args=descriptor.query_args,
            api_key=api_key,
            use_secure=method.use_secure,
        )
