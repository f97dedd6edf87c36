"""
Deployment Processors

One processor per deployment step, in execution order.
"""

from .bundle import BundleDescriptor, BundleProcessor, load_bundle
from .config_writer import ConfigWriterProcessor
from .install import InstallProcessor
from .instance import InstanceProcessor
from .issuer import (
    TIP_KEYWORD,
    IssuerProcessor,
    issuers_from_pairs,
    make_keyword_record,
    resolve_issuer,
)
from .publish import PublishProcessor

__all__ = [
    # Bundle
    "BundleProcessor",
    "BundleDescriptor",
    "load_bundle",
    # Install
    "InstallProcessor",
    # Issuer
    "IssuerProcessor",
    "TIP_KEYWORD",
    "issuers_from_pairs",
    "make_keyword_record",
    "resolve_issuer",
    # Instance
    "InstanceProcessor",
    # Publish
    "PublishProcessor",
    # Config
    "ConfigWriterProcessor",
]
