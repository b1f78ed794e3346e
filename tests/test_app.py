import pytest
from unittest.mock import patch

from vocab_srs.app import (
    SessionExitRequested, announce_achievements, check_answer, cmd_categories, cmd_dashboard, cmd_reset,
    cmd_study, gamification_state, run_study_session, session_prompt,
)
from vocab_srs.db import init_db
from vocab_srs.models import Direction, ReviewMode
from vocab_srs.progress import (
    add_word, load_achievements, load_catalog, load_progress, load_review_history, record_answer,
)
from vocab_srs.seed import seed_words
from vocab_srs.settings import get_saved_session_config

USER = "tester"


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("vocab_srs.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("vocab_srs.app.Prompt.ask", return_value=" MENU "):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("vocab_srs.app.Prompt.ask", return_value="ciao"):
        assert session_prompt("test prompt") == "ciao"


def test_check_answer():
    assert check_answer("città", " Citta ")
    assert not check_answer("città", "citta", ignore_accents=False)
    assert check_answer("Città", "città", ignore_accents=False)
    assert not check_answer("pane", "vino")


def _small_db(tmp_db):
    init_db(tmp_db)
    add_word(tmp_db, "хлеб", "pane", "Food")
    add_word(tmp_db, "вода", "acqua", "Food")
    add_word(tmp_db, "мать", "madre", "Family")
    return load_catalog(tmp_db)


def test_run_study_session_records_answers_until_q(tmp_db, now):
    items = _small_db(tmp_db)
    with patch("vocab_srs.app.now_utc", return_value=now), \
            patch("vocab_srs.app.Prompt.ask", side_effect=["pane", "vino", "q"]):
        assert run_study_session(tmp_db, USER, items, Direction.SOURCE_TO_TARGET) == (1, 2)
    progress = load_progress(tmp_db, USER)
    assert progress[1].correct_count == 1
    assert progress[2].wrong_count == 1
    assert 3 not in progress


def test_run_study_session_reverse_direction(tmp_db, now):
    items = _small_db(tmp_db)[:1]
    with patch("vocab_srs.app.now_utc", return_value=now), \
            patch("vocab_srs.app.Prompt.ask", side_effect=["хлеб"]):
        assert run_study_session(tmp_db, USER, items, Direction.TARGET_TO_SOURCE) == (1, 1)


def test_cmd_study_smart_session(tmp_db, now):
    _small_db(tmp_db)
    with patch("vocab_srs.app.now_utc", return_value=now), \
            patch("vocab_srs.app.random.shuffle"), \
            patch("vocab_srs.app.Prompt.ask", side_effect=["smart", "source-target", "pane", "acqua", "madre"]):
        cmd_study(tmp_db, USER)
    progress = load_progress(tmp_db, USER)
    assert sorted(progress) == [1, 2, 3]
    assert all(r.correct_count == 1 for r in progress.values())
    assert get_saved_session_config(tmp_db).review_mode is ReviewMode.SMART
    assert load_achievements(tmp_db, USER) == ["FIRST_WORD"]


def test_cmd_study_caught_up_skips_session(tmp_db, now):
    _small_db(tmp_db)
    for word_id in (1, 2, 3):
        record_answer(tmp_db, USER, word_id, True, now)
    with patch("vocab_srs.app.now_utc", return_value=now), \
            patch("vocab_srs.app.Prompt.ask", side_effect=["smart", "source-target"]), \
            patch("vocab_srs.app.run_study_session") as run:
        cmd_study(tmp_db, USER)
    run.assert_not_called()


def test_cmd_study_category_session(tmp_db, now):
    _small_db(tmp_db)
    with patch("vocab_srs.app.now_utc", return_value=now), \
            patch("vocab_srs.app.Prompt.ask", side_effect=["category", "Family", "source-target", "madre"]):
        cmd_study(tmp_db, USER)
    assert list(load_progress(tmp_db, USER)) == [3]
    assert get_saved_session_config(tmp_db).category_filter == "Family"


def test_cmd_dashboard_and_categories_render(tmp_db, now):
    init_db(tmp_db)
    seed_words(tmp_db)
    record_answer(tmp_db, USER, 1, True, now)
    record_answer(tmp_db, USER, 2, False, now)
    with patch("vocab_srs.app.now_utc", return_value=now):
        cmd_dashboard(tmp_db, USER)
        cmd_categories(tmp_db, USER)


def test_cmd_reset_requires_confirmation(tmp_db, now):
    _small_db(tmp_db)
    record_answer(tmp_db, USER, 1, True, now)
    with patch("vocab_srs.app.Confirm.ask", return_value=False):
        cmd_reset(tmp_db, USER)
    assert load_progress(tmp_db, USER)
    with patch("vocab_srs.app.Confirm.ask", return_value=True):
        cmd_reset(tmp_db, USER)
    assert load_progress(tmp_db, USER) == {}


def test_announce_achievements_unlocks_once(tmp_db, now):
    _small_db(tmp_db)
    late = now.replace(hour=23)
    record_answer(tmp_db, USER, 1, True, late)
    with patch("vocab_srs.app.now_utc", return_value=late):
        assert announce_achievements(tmp_db, USER, session_reviews=1) == ["FIRST_WORD", "NIGHT_OWL"]
        assert announce_achievements(tmp_db, USER, session_reviews=1) == []


def test_gamification_state_adds_achievement_rewards(tmp_db, now):
    _small_db(tmp_db)
    record_answer(tmp_db, USER, 1, True, now)
    with patch("vocab_srs.app.now_utc", return_value=now):
        announce_achievements(tmp_db, USER, session_reviews=1)
    state = gamification_state(tmp_db, USER, load_review_history(tmp_db, USER))
    assert state.total_xp == 10 + 50
    assert state.current_streak == 1
