"""RecommendationService 单元测试。

测试覆盖:
- 预算过滤和 NoAffordableDeviceError
- 优先使用 Reasoner 结果
- Reasoner 失败或结果无效时整体回退到 FallbackRanker
- 以旧换新估价附加
- 结果结构不变量
"""

import itertools

import pytest

from phone_advisor.models import PreferenceProfile, RankedPick, Ranking
from phone_advisor.services.fallback_ranker import FallbackRanker
from phone_advisor.services.reasoner import (
    LLMReasoner,
    OracleMalformedResponseError,
    OracleUnavailableError,
)
from phone_advisor.services.recommendation_service import (
    NoAffordableDeviceError,
    RecommendationService,
)


def _fallback_only() -> RecommendationService:
    return RecommendationService(use_reasoner=False)


def _ranking(best, *alternatives):
    return Ranking(
        best_match=RankedPick(device_ref=best, match_score=88, reasons=["Oracle pick"]),
        alternatives=[
            RankedPick(device_ref=ref, match_score=70, reasons=["Oracle alternative"])
            for ref in alternatives
        ],
    )


class TestBudgetFiltering:
    """测试预算过滤。"""

    def test_no_affordable_device_raises(self, two_device_catalog):
        """测试预算 200 时没有可选手机。"""
        profile = PreferenceProfile(usage_type="moderate", budget=200, priorities=["camera"])

        with pytest.raises(NoAffordableDeviceError) as exc_info:
            _fallback_only().recommend(profile, two_device_catalog)

        assert exc_info.value.budget == 200
        assert "budget" in str(exc_info.value)

    def test_reasoner_not_called_when_nothing_affordable(self, two_device_catalog, stub_reasoner):
        """测试无可选手机时不调用 Reasoner。"""
        profile = PreferenceProfile(usage_type="moderate", budget=200)
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        with pytest.raises(NoAffordableDeviceError):
            service.recommend(profile, two_device_catalog)

        assert stub_reasoner.call_count == 0

    def test_only_affordable_devices_returned(self, sample_catalog):
        """测试结果只包含预算内的手机。"""
        profile = PreferenceProfile(usage_type="professional", budget=900)

        result = _fallback_only().recommend(profile, sample_catalog)

        assert all(c.device.price <= 900 for c in result.candidates)

    def test_price_equal_to_budget_is_affordable(self, device_factory):
        """测试价格等于预算时可选。"""
        profile = PreferenceProfile(usage_type="light", budget=799)

        result = _fallback_only().recommend(profile, [device_factory(1, price=799)])

        assert result.best_match.device.id == 1


class TestFallbackScenarios:
    """测试无 Reasoner 时的推荐场景。"""

    def test_camera_priority_scenario(self, two_device_catalog, camera_profile):
        """测试重视拍照：B (200MP) 为最佳，A 为备选。"""
        result = _fallback_only().recommend(camera_profile, two_device_catalog)

        assert result.best_match.device.model == "Phone B"
        assert [alt.device.model for alt in result.alternatives] == ["Phone A"]
        assert result.best_match.match_score == 95
        assert result.source == "fallback"

    def test_duplicate_ids_still_return_result(self, device_factory, camera_profile):
        """测试传入目录 id 重复时回退排序仍返回正确的手机。"""
        catalog = [
            device_factory(1, model="Cheap", price=500, main_camera="50MP"),
            device_factory(1, model="Ultra", price=600, main_camera="200MP"),
        ]

        result = _fallback_only().recommend(camera_profile, catalog)

        assert result.best_match.device.model == "Ultra"
        assert [alt.device.model for alt in result.alternatives] == ["Cheap"]

    def test_duplicate_ids_with_bad_reasoner_ranking(self, device_factory, camera_profile, stub_reasoner):
        """测试 id 重复且 Reasoner 结果无效时回退，不向调用方抛出。"""
        catalog = [
            device_factory(1, model="Cheap", price=500, main_camera="50MP"),
            device_factory(1, model="Ultra", price=600, main_camera="200MP"),
        ]
        stub_reasoner.ranking = _ranking("1", "1")
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(camera_profile, catalog)

        assert result.source == "fallback"
        assert result.best_match.device.model == "Ultra"

    def test_best_match_reasons_non_empty(self, sample_catalog, moderate_profile):
        """测试每个候选都有理由。"""
        result = _fallback_only().recommend(moderate_profile, sample_catalog)

        assert all(candidate.reasons for candidate in result.candidates)

    @pytest.mark.parametrize(
        "usage, priorities",
        list(itertools.product(
            ["light", "moderate", "heavy", "professional"],
            [[], ["camera"], ["battery"], ["gaming"], ["display", "design"], ["battery", "camera"]],
        )),
    )
    def test_result_shape_invariants(self, sample_catalog, usage, priorities):
        """测试最多两个备选且最佳匹配不与备选重复。"""
        profile = PreferenceProfile(usage_type=usage, budget=1300, priorities=priorities)

        result = _fallback_only().recommend(profile, sample_catalog)

        assert len(result.alternatives) <= 2
        ids = [c.device.id for c in result.candidates]
        assert len(ids) == len(set(ids))
        assert all(0 <= c.match_score <= 100 for c in result.candidates)

    def test_deterministic(self, sample_catalog):
        """测试重复调用结果一致。"""
        profile = PreferenceProfile(usage_type="heavy", budget=1500, priorities=["gaming"])
        service = _fallback_only()

        assert service.recommend(profile, sample_catalog) == service.recommend(profile, sample_catalog)

    def test_does_not_mutate_inputs(self, sample_catalog, trade_in_profile):
        """测试不修改目录和用户偏好。"""
        catalog_before = list(sample_catalog)
        profile_before = trade_in_profile.to_dict()

        _fallback_only().recommend(trade_in_profile, sample_catalog)

        assert sample_catalog == catalog_before
        assert trade_in_profile.to_dict() == profile_before


class TestReasonerPath:
    """测试 Reasoner 结果的使用和校验。"""

    def test_valid_reasoner_ranking_used(self, sample_catalog, moderate_profile, stub_reasoner):
        """测试有效的 Reasoner 结果被采用。"""
        stub_reasoner.ranking = _ranking("3", "1", "Galaxy A54")
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(moderate_profile, sample_catalog)

        assert result.source == "reasoner"
        assert result.best_match.device.model == "Galaxy S24 Ultra"
        assert result.best_match.match_score == 88
        assert result.best_match.reasons == ("Oracle pick",)
        assert [alt.device.model for alt in result.alternatives] == ["Galaxy S24", "Galaxy A54"]

    def test_llm_reasoner_end_to_end(self, mock_llm_with_ranking, sample_catalog, moderate_profile):
        """测试通过 Mock LLM 的完整流程。"""
        service = RecommendationService(LLMReasoner(llm_service=mock_llm_with_ranking), use_reasoner=True)

        result = service.recommend(moderate_profile, sample_catalog)

        assert result.source == "reasoner"
        assert [c.device.id for c in result.candidates] == [3, 2, 8]
        assert [c.match_score for c in result.candidates] == [92, 85, 78]

    def test_use_reasoner_false_skips_reasoner(self, sample_catalog, moderate_profile, stub_reasoner):
        """测试关闭 Reasoner 时不调用。"""
        stub_reasoner.ranking = _ranking("3")
        service = RecommendationService(stub_reasoner, use_reasoner=False)

        result = service.recommend(moderate_profile, sample_catalog)

        assert stub_reasoner.call_count == 0
        assert result.source == "fallback"

    @pytest.mark.parametrize(
        "ranking",
        [
            _ranking("99"),
            _ranking("1", "2", "Galaxy Z Fold Unknown"),
            _ranking("1", "2", "3", "4"),
            _ranking("1", "1"),
            _ranking("2", "7", "2"),
            Ranking(best_match=RankedPick(device_ref="1", match_score=101, reasons=["x"])),
            Ranking(best_match=RankedPick(device_ref="1", match_score=-1, reasons=["x"])),
            Ranking(best_match=RankedPick(device_ref="1", match_score="90", reasons=["x"])),
            Ranking(best_match=RankedPick(device_ref="1", match_score=True, reasons=["x"])),
            Ranking(best_match=RankedPick(device_ref="1", match_score=90, reasons=[])),
            Ranking(best_match=RankedPick(device_ref="1", match_score=90, reasons=["  "])),
            None,
        ],
    )
    def test_invalid_ranking_falls_back_entirely(self, sample_catalog, moderate_profile, stub_reasoner, ranking):
        """测试无效的 Reasoner 结果被整体丢弃，返回与回退排序相同的结果。"""
        stub_reasoner.ranking = ranking
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(moderate_profile, sample_catalog)

        assert result == _fallback_only().recommend(moderate_profile, sample_catalog)
        assert stub_reasoner.call_count == 1

    def test_reference_outside_budget_falls_back(self, sample_catalog, stub_reasoner):
        """测试 Reasoner 推荐超出预算的手机时回退。"""
        profile = PreferenceProfile(usage_type="light", budget=900)
        # Z Fold5 (id 6) costs 1799
        stub_reasoner.ranking = _ranking("6")
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(profile, sample_catalog)

        assert result.source == "fallback"
        assert result.best_match.device.model == "Galaxy A54"

    @pytest.mark.parametrize(
        "error",
        [
            OracleUnavailableError("timeout"),
            OracleMalformedResponseError("bad json"),
            RuntimeError("unexpected"),
        ],
    )
    def test_reasoner_errors_fall_back(self, sample_catalog, moderate_profile, stub_reasoner, error):
        """测试 Reasoner 抛出任何异常都回退，不向调用方抛出。"""
        stub_reasoner.error = error
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(moderate_profile, sample_catalog)

        assert result == _fallback_only().recommend(moderate_profile, sample_catalog)

    def test_llm_failure_falls_back(self, mock_llm, sample_catalog, moderate_profile):
        """测试 LLM 调用失败时回退。"""
        mock_llm.should_fail = True
        service = RecommendationService(LLMReasoner(llm_service=mock_llm), use_reasoner=True)

        result = service.recommend(moderate_profile, sample_catalog)

        assert result.source == "fallback"
        assert mock_llm.call_count == 1

    def test_reasoner_only_sees_affordable_devices(self, sample_catalog, stub_reasoner):
        """测试 Reasoner 只收到预算内的手机。"""
        seen = {}

        class RecordingReasoner(type(stub_reasoner)):
            def rank(self, profile, devices):
                seen["devices"] = devices
                return super().rank(profile, devices)

        reasoner = RecordingReasoner(ranking=_ranking("4"))
        profile = PreferenceProfile(usage_type="light", budget=700)

        RecommendationService(reasoner, use_reasoner=True).recommend(profile, sample_catalog)

        assert {d.model for d in seen["devices"]} == {"Galaxy A54", "Galaxy S23"}


class TestTradeIn:
    """测试以旧换新估价附加。"""

    def test_trade_in_attached_to_every_candidate(self, sample_catalog, trade_in_profile):
        """测试所有候选都附加估价。"""
        result = _fallback_only().recommend(trade_in_profile, sample_catalog)

        assert [c.trade_in_value for c in result.candidates] == [900] * len(result.candidates)

    def test_trade_in_attached_to_reasoner_result(self, sample_catalog, trade_in_profile, stub_reasoner):
        """测试 Reasoner 结果也附加估价。"""
        stub_reasoner.ranking = _ranking("3", "1")
        service = RecommendationService(stub_reasoner, use_reasoner=True)

        result = service.recommend(trade_in_profile, sample_catalog)

        assert result.source == "reasoner"
        assert result.best_match.trade_in_value == 900
        assert result.alternatives[0].trade_in_value == 900

    def test_no_trade_in_when_not_requested(self, sample_catalog):
        """测试未请求时不附加估价。"""
        profile = PreferenceProfile(
            usage_type="heavy",
            budget=1500,
            current_phone="Samsung Galaxy S22",
            include_trade_in=False,
        )

        result = _fallback_only().recommend(profile, sample_catalog)

        assert all(c.trade_in_value is None for c in result.candidates)

    def test_no_trade_in_without_current_phone(self, sample_catalog):
        """测试没有当前手机时不附加估价。"""
        profile = PreferenceProfile(usage_type="heavy", budget=1500, include_trade_in=True)

        result = _fallback_only().recommend(profile, sample_catalog)

        assert result.best_match.trade_in_value is None


class TestServiceDefaults:
    """测试默认依赖。"""

    def test_default_fallback_is_fallback_ranker(self):
        """测试默认使用 FallbackRanker。"""
        assert isinstance(_fallback_only().fallback, FallbackRanker)

    def test_reasoner_property_none_when_disabled(self):
        """测试关闭时 reasoner 属性为 None。"""
        assert _fallback_only().reasoner is None
