"""Shared fixtures for lesson pipeline tests."""

import json
from types import SimpleNamespace

import httpx
import openai
import pytest

COMPLETIONS_URL = "https://api.deepseek.com/v1/chat/completions"

SAMPLE_BODY = """## 预习目标
1. 说出工程设计的步骤

## 关键词小卡片
- 设计：先想后做

## 预习问题
1. 什么是工程师？

## 安全小实验/观察
用纸杯搭一座小塔。

## 趣味拓展
- 埃菲尔铁塔用了约 1.8 万个零件。

## 练一练
1. 选择题……
答案：B
"""


def make_completion(content, prompt_tokens=100, completion_tokens=300):
    """Build an object shaped like an OpenAI ChatCompletion response."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        ),
    )


def make_status_error(status_code, text="", url=COMPLETIONS_URL):
    """Build the error the OpenAI SDK raises for a non-success response."""
    response = httpx.Response(
        status_code, request=httpx.Request("POST", url), text=text
    )
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=None)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DEEPSEEK_* variables so tests control key and endpoint lookup."""
    for name in ("DEEPSEEK_API_KEY", "DEEPSEEK_BASE_URL", "DEEPSEEK_MODEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def project_dir(tmp_path, clean_env):
    """Temporary site root used as the working directory."""
    clean_env.chdir(tmp_path)
    (tmp_path / "scripts").mkdir()
    return tmp_path


@pytest.fixture
def write_outline(project_dir):
    """Write entries to scripts/outline.json and return its path."""

    def _write(entries):
        path = project_dir / "scripts" / "outline.json"
        path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def completion():
    """Factory fixture for fake ChatCompletion responses."""
    return make_completion


@pytest.fixture
def status_error():
    """Factory fixture for openai.APIStatusError instances."""
    return make_status_error


@pytest.fixture
def sample_body():
    return SAMPLE_BODY
