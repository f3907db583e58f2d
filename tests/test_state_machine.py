from models.analysis_result import DisasterType, ScanHistoryItem
from models.session_models import (
    AnalysisFailed,
    AnalysisSucceeded,
    DecodeFailed,
    FileSelected,
    HistoryCleared,
    HistorySelected,
    ImageDecoded,
    ScanSessionState,
    SessionPhase,
)
from services.errors import ANALYSIS_FAILED_MESSAGE
from services.scan.state_machine import reduce

from fakes import make_result


def _complete_scan(state, image_url="data:image/png;base64,AAAA", result=None):
    state = reduce(state, FileSelected())
    generation = state.generation
    state = reduce(state, ImageDecoded(generation, image_url))
    item = ScanHistoryItem(image_url=image_url, result=result or make_result())
    return reduce(state, AnalysisSucceeded(generation, item)), item


def test_file_selected_clears_error_and_result():
    state = ScanSessionState(error="boom", result=make_result(), phase=SessionPhase.FAILED)
    state = reduce(state, FileSelected())
    assert state.phase is SessionPhase.AWAITING_IMAGE_DECODE
    assert state.error is None
    assert state.result is None
    assert state.generation == 1


def test_decoded_image_starts_analysis():
    state = reduce(ScanSessionState(), FileSelected())
    state = reduce(state, ImageDecoded(state.generation, "data:image/png;base64,AAAA"))
    assert state.phase is SessionPhase.ANALYZING
    assert state.is_analyzing is True
    assert state.selected_image == "data:image/png;base64,AAAA"


def test_success_sets_result_and_prepends_history():
    state, first = _complete_scan(ScanSessionState())
    state, second = _complete_scan(state, result=make_result(DisasterType.TSUNAMI, 0.7))
    assert state.phase is SessionPhase.RESULT_READY
    assert state.is_analyzing is False
    assert state.result == second.result
    assert [item.id for item in state.history] == [second.id, first.id]


def test_failure_sets_error_and_keeps_history():
    state, item = _complete_scan(ScanSessionState())
    state = reduce(state, FileSelected())
    generation = state.generation
    state = reduce(state, ImageDecoded(generation, "data:image/png;base64,BBBB"))
    state = reduce(state, AnalysisFailed(generation, ANALYSIS_FAILED_MESSAGE))
    assert state.phase is SessionPhase.FAILED
    assert state.error == ANALYSIS_FAILED_MESSAGE
    assert state.result is None
    assert state.is_analyzing is False
    assert state.history == (item,)


def test_decode_failure_sets_error():
    state = reduce(ScanSessionState(), FileSelected())
    state = reduce(state, DecodeFailed(state.generation, "unreadable"))
    assert state.phase is SessionPhase.FAILED
    assert state.error == "unreadable"


def test_history_is_capped_newest_first():
    state = ScanSessionState()
    items = []
    for _ in range(11):
        state, item = _complete_scan(state)
        items.append(item)
    assert len(state.history) == 10
    assert state.history[0].id == items[-1].id
    assert [item.id for item in state.history] == [item.id for item in reversed(items[1:])]


def test_custom_history_limit():
    state = ScanSessionState()
    for _ in range(4):
        state = reduce(state, FileSelected())
        item = ScanHistoryItem(image_url="x", result=make_result())
        state = reduce(state, AnalysisSucceeded(state.generation, item), history_limit=3)
    assert len(state.history) == 3


def test_stale_completion_is_dropped():
    state = reduce(ScanSessionState(), FileSelected())
    first_generation = state.generation
    state = reduce(state, ImageDecoded(first_generation, "first"))
    state = reduce(state, FileSelected())
    second_generation = state.generation
    state = reduce(state, ImageDecoded(second_generation, "second"))

    late = ScanHistoryItem(image_url="first", result=make_result(DisasterType.NORMAL, 0.5))
    after_late = reduce(state, AnalysisSucceeded(first_generation, late))
    assert after_late is state

    after_late_failure = reduce(state, AnalysisFailed(first_generation, "old failure"))
    assert after_late_failure.error is None
    assert after_late_failure.is_analyzing is True


def test_history_selection_restores_without_reordering():
    state, first = _complete_scan(ScanSessionState(), image_url="first")
    state, second = _complete_scan(state, image_url="second", result=make_result(DisasterType.NORMAL, 0.4))
    order = tuple(item.id for item in state.history)

    state = reduce(state, HistorySelected(first.id))
    assert state.selected_image == "first"
    assert state.result == first.result
    assert state.phase is SessionPhase.RESULT_READY
    assert tuple(item.id for item in state.history) == order


def test_unknown_history_selection_is_ignored():
    state, _ = _complete_scan(ScanSessionState())
    assert reduce(state, HistorySelected("missing")) is state


def test_clear_history_keeps_current_result():
    state, item = _complete_scan(ScanSessionState(), image_url="current")
    state = reduce(state, HistoryCleared())
    assert state.history == ()
    assert state.result == item.result
    assert state.selected_image == "current"


def test_clear_history_on_empty_history():
    assert reduce(ScanSessionState(), HistoryCleared()).history == ()


def test_history_selection_during_analysis_stays_analyzing():
    state, first = _complete_scan(ScanSessionState(), image_url="first")
    state = reduce(state, FileSelected())
    generation = state.generation
    state = reduce(state, ImageDecoded(generation, "pending"))

    state = reduce(state, HistorySelected(first.id))
    assert state.phase is SessionPhase.ANALYZING
    assert state.is_analyzing is True
    assert state.selected_image == "first"
    assert state.result == first.result

    pending = ScanHistoryItem(image_url="pending", result=make_result(DisasterType.NORMAL, 0.3))
    state = reduce(state, AnalysisSucceeded(generation, pending))
    assert state.phase is SessionPhase.RESULT_READY
    assert state.is_analyzing is False
    assert state.history[0] is pending
