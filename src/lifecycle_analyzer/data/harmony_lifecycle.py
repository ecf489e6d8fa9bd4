"""Versioned HarmonyOS lifecycle name tables.

Each catalog version pins the callback names recognized per partition and
the structural inputs used to classify classes (base names and markers).

v1-minimal: the hand-picked set of commonly used callbacks.
v2-framework: the framework entry-method tables (26 Ability / 17 Component).
v3-framework: v2 plus UI event callbacks and the ``@Entry`` marker.
"""
from __future__ import annotations

from typing import Dict, Tuple

# =============================================================================
# Ability (framework entry container) callbacks
# =============================================================================

ABILITY_LIFECYCLE_MINIMAL: Tuple[str, ...] = (
    "onCreate",
    "onDestroy",
    "onWindowStageCreate",
    "onWindowStageDestroy",
    "onForeground",
    "onBackground",
    "onNewWant",
    "onConfigurationUpdate",
    "onBackPressed",
    "onWindowStageWillDestroy",
    "onContinue",
    "onSaveState",
)

ABILITY_LIFECYCLE_FRAMEWORK: Tuple[str, ...] = (
    "onCreate",
    "onDestroy",
    "onWindowStageCreate",
    "onWindowStageDestroy",
    "onForeground",
    "onBackground",
    "onBackup",
    "onRestore",
    "onContinue",
    "onNewWant",
    "onDump",
    "onSaveState",
    "onShare",
    "onPrepareToTerminate",
    "onBackPressed",
    "onSessionCreate",
    "onSessionDestory",
    "onAddForm",
    "onCastToNormalForm",
    "onUpdateForm",
    "onChangeFormVisibility",
    "onFormEvent",
    "onRemoveForm",
    "onConfigurationUpdate",
    "onAcquireFormState",
    "onWindowStageWillDestroy",
)

# =============================================================================
# Component (UI component) callbacks
# =============================================================================

COMPONENT_LIFECYCLE_MINIMAL: Tuple[str, ...] = (
    "aboutToAppear",
    "aboutToDisappear",
    "onPageShow",
    "onPageHide",
    "onBackPress",
    "onDidBuild",
    "aboutToReuse",
    "aboutToRecycle",
    "onWillApplyTheme",
    "onLayout",
    "onMeasure",
    "onMeasureSize",
    "onFormRecycle",
    "onFormRecover",
)

COMPONENT_LIFECYCLE_FRAMEWORK: Tuple[str, ...] = (
    "build",
    "aboutToAppear",
    "aboutToDisappear",
    "aboutToReuse",
    "aboutToRecycle",
    "onWillApplyTheme",
    "onLayout",
    "onPlaceChildren",
    "onMeasure",
    "onMeasureSize",
    "onPageShow",
    "onPageHide",
    "onFormRecycle",
    "onFormRecover",
    "onBackPress",
    "pageTransition",
    "onDidBuild",
)

UI_CALLBACK_METHODS: Tuple[str, ...] = (
    "onClick",
    "onTouch",
    "onAppear",
    "onDisAppear",
    "onDragStart",
    "onDragEnter",
    "onDragMove",
    "onDragLeave",
    "onDrop",
    "onKeyEvent",
    "onFocus",
    "onBlur",
    "onHover",
    "onMouse",
    "onAreaChange",
    "onVisibleAreaChange",
)

# =============================================================================
# Classification inputs
# =============================================================================

ABILITY_BASES_MINIMAL: Tuple[str, ...] = ("UIAbility", "Ability", "UIExtensionAbility")

ABILITY_BASES_FRAMEWORK: Tuple[str, ...] = (
    "UIAbility",
    "Ability",
    "UIExtensionAbility",
    "FormExtensionAbility",
    "BackupExtensionAbility",
    "ServiceExtensionAbility",
)

COMPONENT_BASES: Tuple[str, ...] = ("CustomComponent", "ViewPU")

# Front-end generated default classes and anonymous closures.
SYNTHETIC_CLASS_PATTERNS: Tuple[str, ...] = ("_DEFAULT_", "%AC", "%dflt")

# Callbacks worth suggesting when a project never implements them.
RECOMMENDED_CALLBACKS: Tuple[Tuple[str, str, str], ...] = (
    ("onBackPress", "component", "Handle the back key for a better user experience"),
    ("aboutToReuse", "component", "Component reuse, improves performance"),
    ("aboutToRecycle", "component", "Component recycling, improves performance"),
    ("onNewWant", "ability", "Handle a new Want so the app can be re-launched"),
    ("onConfigurationUpdate", "ability", "React to system configuration changes"),
    ("onDidBuild", "component", "Post-build processing"),
    ("onWillApplyTheme", "component", "Theme switching support"),
)

CATALOG_TABLES: Dict[str, Dict[str, object]] = {
    "v1-minimal": {
        "ability": ABILITY_LIFECYCLE_MINIMAL,
        "component": COMPONENT_LIFECYCLE_MINIMAL,
        "callback": (),
        "ability_bases": ABILITY_BASES_MINIMAL,
        "component_bases": COMPONENT_BASES,
        "component_markers": ("Component",),
        "entry_markers": (),
        "synthetic_class_patterns": SYNTHETIC_CLASS_PATTERNS,
        "weak_risk_signals": True,
        "recommendations": RECOMMENDED_CALLBACKS[:5],
    },
    "v2-framework": {
        "ability": ABILITY_LIFECYCLE_FRAMEWORK,
        "component": COMPONENT_LIFECYCLE_FRAMEWORK,
        "callback": (),
        "ability_bases": ABILITY_BASES_FRAMEWORK,
        "component_bases": COMPONENT_BASES,
        "component_markers": ("Component",),
        "entry_markers": (),
        "synthetic_class_patterns": SYNTHETIC_CLASS_PATTERNS,
        "weak_risk_signals": False,
        "recommendations": RECOMMENDED_CALLBACKS[:5],
    },
    "v3-framework": {
        "ability": ABILITY_LIFECYCLE_FRAMEWORK,
        "component": COMPONENT_LIFECYCLE_FRAMEWORK,
        "callback": UI_CALLBACK_METHODS,
        "ability_bases": ABILITY_BASES_FRAMEWORK,
        "component_bases": COMPONENT_BASES,
        "component_markers": ("Component",),
        "entry_markers": ("Entry",),
        "synthetic_class_patterns": SYNTHETIC_CLASS_PATTERNS,
        "weak_risk_signals": False,
        "recommendations": RECOMMENDED_CALLBACKS,
    },
}

DEFAULT_CATALOG_VERSION = "v3-framework"
