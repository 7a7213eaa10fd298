"""Registration of every API group version in the package."""

from __future__ import annotations

from localstorage import api_v1, api_v1alpha1
from localstorage.scheme import Scheme, SchemeBuilder

ADD_TO_SCHEMES = SchemeBuilder().register(api_v1.add_to_scheme, api_v1alpha1.add_to_scheme)


def add_to_scheme(scheme: Scheme) -> None:
    """Add every type defined by the package to the scheme."""
    ADD_TO_SCHEMES.add_to_scheme(scheme)