"""测试配置和共享 Fixtures。"""

import json

import pytest

from phone_advisor.models import Device, PreferenceProfile, Ranking
from phone_advisor.services import InMemoryCatalog, Reasoner


# ============================================================================
# Mock Services
# ============================================================================

class MockLLMService:
    """测试用 Mock LLM 服务。

    可以通过设置 response 属性来控制返回值。
    可以通过设置 should_fail 来模拟失败。
    """

    def __init__(self):
        self.response = '{}'
        self.should_fail = False
        self.call_count = 0
        self.last_prompt = None

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        self.call_count += 1
        self.last_prompt = prompt

        if self.should_fail:
            from phone_advisor.services.llm_service import LLMServiceError
            raise LLMServiceError("Mock LLM failure")

        return self.response


class StubReasoner(Reasoner):
    """测试用固定结果 Reasoner。

    设置 ranking 返回固定排名，或设置 error 抛出异常。
    """

    def __init__(self, ranking: Ranking | None = None, error: Exception | None = None):
        self.ranking = ranking
        self.error = error
        self.call_count = 0

    def rank(self, profile, devices):
        self.call_count += 1
        if self.error is not None:
            raise self.error
        return self.ranking


def make_device(
    device_id: int,
    *,
    model: str | None = None,
    price: int = 799,
    series: str = "S",
    main_camera: str = "50MP Wide",
    battery: str = "4000 mAh",
    processor: str = "Snapdragon 8 Gen 3",
    display_type: str = "Dynamic AMOLED 2X",
) -> Device:
    """创建测试用 Device。"""
    return Device(
        id=device_id,
        model=model or f"Phone {device_id}",
        series=series,
        year=2024,
        display_size="6.2 inches",
        display_type=display_type,
        resolution="2340 x 1080",
        processor=processor,
        ram="8GB",
        storage_options=("128GB", "256GB"),
        main_camera=main_camera,
        front_camera="12MP",
        battery=battery,
        price=price,
        features="IP68, Wireless Charging",
    )


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def sample_catalog() -> list[Device]:
    """内置示例目录（8 款手机）。"""
    return InMemoryCatalog().list_devices()


@pytest.fixture
def two_device_catalog() -> list[Device]:
    """两款手机：A 便宜 50MP，B 昂贵 200MP。"""
    return [
        make_device(1, model="Phone A", price=799, main_camera="50MP", battery="4000 mAh"),
        make_device(2, model="Phone B", price=1299, main_camera="200MP", battery="5000 mAh"),
    ]


# ============================================================================
# Profile Fixtures
# ============================================================================

@pytest.fixture
def moderate_profile() -> PreferenceProfile:
    """预算 1500、无优先项的普通用户。"""
    return PreferenceProfile(usage_type="moderate", budget=1500)


@pytest.fixture
def camera_profile() -> PreferenceProfile:
    """预算 1500、重视拍照的用户。"""
    return PreferenceProfile(usage_type="moderate", budget=1500, priorities=["camera"])


@pytest.fixture
def trade_in_profile() -> PreferenceProfile:
    """需要以旧换新的用户。"""
    return PreferenceProfile(
        usage_type="heavy",
        budget=1500,
        current_phone="Samsung Galaxy S24 Ultra",
        current_storage="1TB",
        include_trade_in=True,
        trade_in_condition="excellent",
    )


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def mock_llm() -> MockLLMService:
    """创建 Mock LLM 服务。"""
    return MockLLMService()


@pytest.fixture
def mock_llm_with_ranking(mock_llm: MockLLMService) -> MockLLMService:
    """创建返回排名 JSON 的 Mock LLM（引用示例目录中的设备）。"""
    mock_llm.response = json.dumps({
        "bestMatch": {
            "deviceRef": "3",
            "matchScore": 92,
            "reasons": ["200MP camera", "Top-tier processor"],
        },
        "alternatives": [
            {"deviceRef": "2", "matchScore": 85, "reasons": ["Large display"]},
            {"deviceRef": "Galaxy S23+", "matchScore": 78, "reasons": ["Lower price"]},
        ],
    })
    return mock_llm


@pytest.fixture
def device_factory():
    """返回 make_device 工厂函数。"""
    return make_device


@pytest.fixture
def stub_reasoner() -> StubReasoner:
    """创建 Stub Reasoner，测试中设置 ranking 或 error。"""
    return StubReasoner()
