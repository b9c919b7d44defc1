"""Exception classes for lit-ipfs."""

from typing import Iterable, Optional


class LitIpfsError(Exception):
    """Base class for all lit-ipfs errors."""


class MalformedHeader(LitIpfsError):
    """A serialized structure does not start with a valid protocol header."""


class MalformedPayload(LitIpfsError):
    """A payload decoded, but not into the shape its version promises."""


class ProtocolVersionError(LitIpfsError):
    """A protocol version outside what this build understands."""

    def __init__(self, version: int, message: str):
        super().__init__(message)
        self.version = version


class VersionMismatch(ProtocolVersionError):
    """A strict decoder got a payload from a different protocol version."""

    def __init__(self, found: int, expected: int):
        super().__init__(
            found, f"Unsupported protocol version {found} (expected {expected})"
        )
        self.found = found
        self.expected = expected


class InvalidVersion(ProtocolVersionError):
    """Version 0 is reserved and never issued."""

    def __init__(self, version: int = 0):
        super().__init__(version, f"Version {version} is invalid")


class TooNew(ProtocolVersionError):
    """The payload comes from a newer protocol than this one."""

    def __init__(self, version: int, current: Optional[int] = None):
        message = f"Version {version} is too new! Please upgrade lit-ipfs"
        if current is not None:
            message += f" (running version {current})"
        super().__init__(version, message)
        self.current = current


class UnsupportedObjectKind(LitIpfsError):
    """An object of a kind the graph walk cannot handle."""

    def __init__(self, kind: str, obj_hash: Optional[str] = None):
        if obj_hash:
            message = f"Don't know how to handle {kind} object {obj_hash}"
        else:
            message = f"Don't know how to handle {kind} object"
        super().__init__(message)
        self.kind = kind
        self.hash = obj_hash


class ObjectNotIndexed(LitIpfsError):
    """The fetch walk needs a hash absent from the index object table."""

    def __init__(self, obj_hash: str):
        super().__init__(f"Could not find object {obj_hash} in the index")
        self.hash = obj_hash


class ObjectNotFound(LitIpfsError):
    """An object is missing from the local object database."""

    def __init__(self, obj_hash: str):
        super().__init__(f"Object {obj_hash} not found")
        self.hash = obj_hash


class RefNotFound(LitIpfsError):
    """A local ref could not be resolved."""

    def __init__(self, ref_name: str):
        super().__init__(f"Reference {ref_name} not found")
        self.ref_name = ref_name


class FetchFirst(LitIpfsError):
    """A non-forced push would overwrite objects the pusher has never fetched."""

    def __init__(self, ref_name: str, missing: Iterable[str]):
        self.ref_name = ref_name
        self.missing = frozenset(missing)
        super().__init__(
            f"Remote {ref_name} contains {len(self.missing)} object(s) missing "
            f"locally; fetch first or force the push"
        )


class ObjectTreeInconsistency(LitIpfsError):
    """Downloaded bytes do not hash to the id the index claims for them."""

    def __init__(self, expected: str, got: str, link: Optional[str] = None):
        source = f" from {link}" if link else ""
        super().__init__(
            f"Object tree inconsistency detected: fetched {expected}{source}, "
            f"but write result hashes to {got}"
        )
        self.expected = expected
        self.got = got
        self.link = link


class AddressError(LitIpfsError):
    """A remote address failed to parse."""


class InvalidLinkFormat(AddressError):
    """The text is not any of the known address forms."""

    def __init__(self, text: str):
        super().__init__(f'Invalid link format for string "{text}"')
        self.text = text


class InvalidHashLength(AddressError):
    """The address hash has the wrong length."""

    def __init__(self, got: int, expected: int):
        super().__init__(f"Got a hash {got} chars long, expected {expected}")
        self.got = got
        self.expected = expected
