"""
API Module - Boundary schemas shared with the transport collaborator.

The transport decodes engine responses into RawSnapshot values and
encodes StepResponse values into engine requests. Nothing else in
the core knows about the wire.
"""

from .schemas import (
    # Enums
    Alliance,
    DisplayType,
    AlertKind,
    DEATH_ALERT_KINDS,
    # Inbound
    RawPosition,
    RawOrder,
    RawEntity,
    RawAlert,
    RawPlayerCommon,
    RawScore,
    RawSnapshot,
    RawExpansion,
    RawRamp,
    GameSetup,
    parse_entity,
    # Outbound
    ActionPayload,
    StepResponse,
)

__all__ = [
    "Alliance",
    "DisplayType",
    "AlertKind",
    "DEATH_ALERT_KINDS",
    "RawPosition",
    "RawOrder",
    "RawEntity",
    "RawAlert",
    "RawPlayerCommon",
    "RawScore",
    "RawSnapshot",
    "RawExpansion",
    "RawRamp",
    "GameSetup",
    "parse_entity",
    "ActionPayload",
    "StepResponse",
]
