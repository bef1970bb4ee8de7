import sys

from security_hook.core.classifier import ContentClassifier, build_prompt, truncate_content
from security_hook.exception.exception import ServiceError


def test_prompt_embeds_escaped_path_and_content():
    prompt = build_prompt("print('hi')", 'weird "name".py')
    assert 'CODE TO ANALYZE FROM FILE "weird \\"name\\".py":' in prompt
    assert prompt.endswith("print('hi')")
    assert '{"hasSensitiveData": false}' in prompt


def test_truncate_content_caps_length():
    assert truncate_content("abcdef", "a.py", 4) == "abcd"
    assert truncate_content("abc", "a.py", 4) == "abc"


def test_truncate_content_logs_warning_only_when_cutting(hook_logs):
    truncate_content("abc", "small.py", 4)
    assert not [r for r in hook_logs.records if r.levelname == "WARNING"]

    truncate_content("abcdef", "big.py", 4)
    warnings = [r for r in hook_logs.records if r.levelname == "WARNING"]
    assert len(warnings) == 1
    assert warnings[0].name == "SecurityHook"
    assert "big.py truncated from 6 to 4 characters" in warnings[0].getMessage()


def test_fallback_detectors_see_content_past_the_cap(fake_client):
    padding = "x = 1\n" * 600
    content = padding + 'const apiKey = "AKIA1234567890ABCDEF";\n'
    classifier = ContentClassifier(fake_client(available=False), service_available=False, max_content_chars=5000)

    result = classifier.classify(content, "app.js")

    assert [issue.type for issue in result.issues] == ["AWS Access Key"]


def test_safety_net_sees_content_past_the_cap(fake_client):
    client = fake_client(responses=['{"hasSensitiveData": false}'])
    classifier = ContentClassifier(client, max_content_chars=100, regex_safety_net=True)

    result = classifier.classify("x = 1\n" * 50 + 'password = "hunter22"\n', "settings.py")

    assert "hunter22" not in client.prompts[0]
    assert [issue.type for issue in result.issues] == ["Hardcoded Credential"]


def test_classifier_sends_truncated_content(fake_client):
    client = fake_client()
    classifier = ContentClassifier(client, max_content_chars=10, regex_safety_net=False)

    classifier.classify("x" * 50, "big.txt")

    assert client.prompts[0].endswith("x" * 10)
    assert "x" * 11 not in client.prompts[0]


def test_classifier_uses_model_verdict(fake_client):
    client = fake_client(responses=['{"hasSensitiveData": true, "issues": [{"line": "a", "type": "Token"}]}'])
    classifier = ContentClassifier(client, regex_safety_net=False)

    result = classifier.classify("token = abc", "app.py")

    assert result.has_sensitive_data
    assert result.issues[0].type == "Token"


def test_service_error_becomes_blocking_finding(fake_client):
    client = fake_client(error=ServiceError("connection reset", sys))
    classifier = ContentClassifier(client, regex_safety_net=False)

    result = classifier.classify("print('hi')", "app.py")

    assert result.has_sensitive_data
    assert [issue.type for issue in result.issues] == ["OllamaAPIError"]


def test_unavailable_service_uses_regex_detectors(fake_client):
    client = fake_client(available=False)
    classifier = ContentClassifier(client, service_available=False, regex_safety_net=False)

    result = classifier.classify('const apiKey = "AKIA1234567890ABCDEF";', "app.js")

    assert [issue.type for issue in result.issues] == ["AWS Access Key"]
    assert client.prompts == []


def test_regex_safety_net_adds_detector_findings(fake_client):
    client = fake_client(responses=['{"hasSensitiveData": false}'])
    classifier = ContentClassifier(client, regex_safety_net=True)

    result = classifier.classify('secret = "shh"', "app.py")

    assert result.has_sensitive_data
    assert [issue.type for issue in result.issues] == ["Hardcoded Credential"]


def test_max_content_chars_comes_from_settings(monkeypatch, fake_client):
    monkeypatch.setenv("SECURITY_HOOK_MAX_CONTENT_CHARS", "3")
    classifier = ContentClassifier(fake_client())
    assert classifier.max_content_chars == 3
