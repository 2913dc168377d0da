from pathlib import Path
from importlib import import_module

from planview_checker import config
from planview_checker.logger import log

# CLI name -> (module under planview_checker.checks, class name)
CHECK_MAPPING = {
    "arc_length": ("arc_length_order_check", "ArcLengthOrderCheck"),
    "continuity": ("continuity_check", "ContinuityCheck"),
    "length": ("length_check", "LengthCheck"),
}

# CLI name -> {constructor keyword: key in check_params / config.THRESHOLDS}
CHECK_TOLERANCES = {
    "arc_length": {},
    "continuity": {
        "position_tolerance": "position_tolerance",
        "heading_tolerance": "heading_tolerance",
    },
    "length": {"tolerance": "length_tolerance"},
}


def load_checks(check_names, check_params=None):
    """
    Import and instantiate the named plan view checks, in the order given.
    Unknown names are logged and skipped.
    """
    params = check_params or {}

    checks = []
    for name in check_names:
        if name not in CHECK_MAPPING:
            log(f"Unknown check '{name}'. Available: {list(CHECK_MAPPING.keys())}", level="ERROR")
            continue

        module_name, class_name = CHECK_MAPPING[name]
        try:
            module = import_module(f"planview_checker.checks.{module_name}")
            check_class = getattr(module, class_name)
        except (ModuleNotFoundError, AttributeError) as e:
            log(f"Could not load check '{name}': {e}", level="ERROR")
            continue

        kwargs = {
            kwarg: params.get(key, config.THRESHOLDS[key])
            for kwarg, key in CHECK_TOLERANCES[name].items()
        }
        checks.append(check_class(verbose=params.get("verbose", False), **kwargs))
        log(f"Loaded check: {class_name}")

    return checks


def get_output_path(input_file: Path, suffix: str = "errors", extension: str = ".dxf") -> Path:
    """'roads.json' -> 'roads_errors.dxf' next to the input."""
    return input_file.with_name(f"{input_file.stem}_{suffix}{extension}")
