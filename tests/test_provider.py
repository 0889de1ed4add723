import pytest

from swebot.provider import CodeRequest, CodeResponse, Provider


class EchoProvider(Provider):
    def generate_code(self, request):
        return CodeResponse(summary=f"{request.repo_path}:{request.prompt}")

    def name(self):
        return "echo"


def test_provider_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        Provider()


def test_concrete_provider_returns_response():
    provider = EchoProvider()
    request = CodeRequest(prompt="do it", repo_path="/repo")
    response = provider.generate_code(request)
    assert response == CodeResponse(summary="/repo:do it")
    assert provider.name() == "echo"


def test_code_request_defaults_are_empty():
    request = CodeRequest()
    assert request.prompt == ""
    assert request.repo_path == ""
    assert request.context == {}
    assert request.allowed_tools == []
    assert request.disallowed_tools == []


def test_code_request_defaults_are_not_shared():
    first = CodeRequest()
    second = CodeRequest()
    first.context["github_token"] = "token"
    first.allowed_tools.append("Read")
    assert second.context == {}
    assert second.allowed_tools == []


def test_code_response_equality():
    assert CodeResponse(summary="done") == CodeResponse(summary="done")
    assert CodeResponse().summary == ""