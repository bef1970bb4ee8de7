from security_hook.config.settings_store import get_setting, parse_bool, set_setting

UNAVAILABLE_POLICIES = ("fail", "fallback")
DEFAULT_MAX_CONTENT_CHARS = 5000
DEFAULT_EXCLUDE_FILE = ".security-exclude"


def get_max_content_chars() -> int:
    return max(1, int(get_setting("scan.max_content_chars", DEFAULT_MAX_CONTENT_CHARS, int)))


def set_max_content_chars(value: int) -> bool:
    return set_setting("scan.max_content_chars", max(1, int(value)))


def get_unavailable_policy() -> str:
    policy = str(get_setting("scan.unavailable_policy", "fail", str) or "fail").strip().lower()
    if policy not in UNAVAILABLE_POLICIES:
        return "fail"
    return policy


def set_unavailable_policy(policy: str) -> bool:
    selected = str(policy or "").strip().lower()
    if selected not in UNAVAILABLE_POLICIES:
        supported = ", ".join(UNAVAILABLE_POLICIES)
        raise ValueError(f"Unsupported policy '{policy}'. Supported: {supported}")
    return set_setting("scan.unavailable_policy", selected)


def get_regex_safety_net() -> bool:
    return bool(get_setting("scan.regex_safety_net", False, bool))


def set_regex_safety_net(enabled) -> bool:
    return set_setting("scan.regex_safety_net", parse_bool(enabled))


def get_exclude_file_name() -> str:
    name = str(get_setting("scan.exclude_file", DEFAULT_EXCLUDE_FILE, str) or DEFAULT_EXCLUDE_FILE).strip()
    return name or DEFAULT_EXCLUDE_FILE
