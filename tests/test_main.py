"""
Tests for the Campus Feed Main Application

Tests cover service wiring, each command's behaviour against mocked
services, argument parsing and the exit codes of main().
"""

import pytest
from unittest.mock import MagicMock, patch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import CampusFeed, main, parse_arguments, parse_post_type
from data.models import (
    Announcement, ClassificationResult, Comment, Event, LostFoundItem, PostType, ReactionResult,
    ReactionSummary, ReactionType
)
from services.api_check_service import CheckReport
from utils.exceptions import ForbiddenError, ServerError, ValidationError

from conftest import DEVICE_ID


@pytest.fixture
def services(event_json, lost_found_json, announcement_json):
    events = MagicMock()
    events.list_for_feed.return_value = [Event.from_dict(event_json(id=1))]
    lost_found = MagicMock()
    lost_found.list_for_feed.return_value = [LostFoundItem.from_dict(lost_found_json(id=2))]
    announcements = MagicMock()
    announcements.list_for_feed.return_value = [Announcement.from_dict(announcement_json(id=3))]
    return {
        'events': events,
        'lost_found': lost_found,
        'announcements': announcements,
        'comments': MagicMock(),
        'reactions': MagicMock(),
        'ai': MagicMock(),
    }


@pytest.fixture
def output():
    return []


@pytest.fixture
def app(services, device, output, no_color):
    return CampusFeed(client=MagicMock(), device=device, out=output.append, validate=False, **services)


def printed(output):
    return "\n".join(str(line) for line in output)


# =============================================================================
# Initialization Tests
# =============================================================================

class TestCampusFeedInitialization:

    def test_init_builds_default_services(self, device):
        with patch('main.ApiClient') as mock_client_cls, \
             patch('main.EventsService') as mock_events_cls, \
             patch('main.AIService') as mock_ai_cls:

            app = CampusFeed(device=device, validate=False)

            mock_client_cls.assert_called_once()
            mock_events_cls.assert_called_once_with(mock_client_cls.return_value, device)
            mock_ai_cls.assert_called_once_with(mock_client_cls.return_value)
            assert app.sources[PostType.EVENT] is mock_events_cls.return_value

    def test_init_uses_injected_services(self, app, services):
        assert app.sources[PostType.LOST_FOUND] is services['lost_found']
        assert app.search_service.events is services['events']

    def test_init_validates_settings(self, device):
        with patch('main.validate_settings') as mock_validate:
            CampusFeed(client=MagicMock(), device=device)
            mock_validate.assert_called_once()


# =============================================================================
# Command Tests
# =============================================================================

class TestFeedCommand:

    def test_show_feed_prints_all_posts(self, app, output):
        session = app.show_feed()

        text = printed(output)
        assert [i.id for i in session.items] == [1, 2, 3]
        assert "AI Workshop" in text and "Blue wallet" in text and "Mid-sem schedule" in text
        assert "all (3)" in text
        assert "< comments >" in text

    def test_show_feed_with_reactions(self, app, services, output):
        services['reactions'].get_post_reactions.return_value = ReactionSummary(
            counts={ReactionType.LIKE: 2})

        app.show_feed("events", with_reactions=True)

        services['reactions'].get_post_reactions.assert_called_once_with(PostType.EVENT, 1)
        assert "2 reactions" in printed(output)

    def test_reaction_failure_still_renders_post(self, app, services, output):
        services['reactions'].get_post_reactions.side_effect = ServerError("boom", status_code=500)

        app.show_feed("events", with_reactions=True)

        assert "AI Workshop" in printed(output)


class TestPostCommands:

    def test_create_event_from_flags(self, app, services, event_json):
        services['events'].create.return_value = Event.from_dict(event_json(id=42))

        record = app.create_post("event", {'title': 'Hackathon', 'description': '24h', 'location': 'Hall',
                                           'date': '2025-04-01T09:00'})

        assert record.id == 42
        payload = services['events'].create.call_args.args[0]
        assert payload['eventDate'] == '2025-04-01T09:00'
        # The feed is reloaded after posting
        services['events'].list_for_feed.assert_called()

    def test_create_found_item_sets_type(self, app, services, lost_found_json):
        services['lost_found'].create.return_value = LostFoundItem.from_dict(lost_found_json(id=7))

        app.create_post("found", {'item_name': 'Umbrella', 'description': 'Black', 'location': 'Canteen'})

        assert services['lost_found'].create.call_args.args[0]['type'] == 'FOUND'

    def test_create_interactive(self, services, device, announcement_json, output):
        answers = iter(["Library closed", "Inventory week", "", "Library", "notice", "high", "", ""])
        app = CampusFeed(client=MagicMock(), device=device, out=output.append, validate=False,
                         input_func=lambda prompt: next(answers), **services)
        services['announcements'].create.return_value = Announcement.from_dict(announcement_json(id=9))

        app.create_post("announcement", {}, interactive=True)

        payload = services['announcements'].create.call_args.args[0]
        assert (payload['type'], payload['priority']) == ("NOTICE", "HIGH")

    def test_create_from_prompt_asks_for_missing_fields(self, services, device, event_json, output):
        prompts = []

        def answer(prompt):
            prompts.append(prompt)
            return "Main Hall"

        app = CampusFeed(client=MagicMock(), device=device, out=output.append, validate=False,
                         input_func=answer, **services)
        services['ai'].classify_post.return_value = ClassificationResult(
            type="event", confidence=0.9, title="Hackathon", event_date="2025-04-01T09:00")
        services['events'].create.return_value = Event.from_dict(event_json(id=42))

        record = app.create_from_prompt("24h hackathon on April 1st at 9")

        services['ai'].classify_post.assert_called_once_with("24h hackathon on April 1st at 9")
        assert prompts == ["Location: "]
        payload = services['events'].create.call_args.args[0]
        assert payload['title'] == "Hackathon"
        assert payload['description'] == "24h hackathon on April 1st at 9"
        assert payload['location'] == "Main Hall"
        assert record.id == 42
        assert "Posted! (event #42)" in printed(output)
        services['events'].list_for_feed.assert_called()

    def test_create_from_prompt_complete_classification_skips_prompts(self, services, device, lost_found_json):
        def no_input(prompt):
            raise AssertionError(f"unexpected prompt {prompt!r}")

        app = CampusFeed(client=MagicMock(), device=device, out=lambda line: None, validate=False,
                         input_func=no_input, **services)
        services['ai'].classify_post.return_value = ClassificationResult(
            type="lost", confidence=0.8, item_name="Blue wallet", location="Library")
        services['lost_found'].create.return_value = LostFoundItem.from_dict(lost_found_json(id=8))

        app.create_from_prompt("Lost my blue wallet in the library")

        payload = services['lost_found'].create.call_args.args[0]
        assert (payload['itemName'], payload['type'], payload['location']) == ("Blue wallet", "LOST", "Library")

    def test_create_from_prompt_unknown_type_is_not_submitted(self, app, services):
        services['ai'].classify_post.return_value = ClassificationResult(type="", confidence=0.1)

        with pytest.raises(ValidationError):
            app.create_from_prompt("hmm")

        for name in ('events', 'lost_found', 'announcements'):
            services[name].create.assert_not_called()
    def test_invalid_post_raises(self, app, services):
        with pytest.raises(ValidationError):
            app.create_post("event", {'title': 'Only a title'})
        services['events'].create.assert_not_called()

    def test_unknown_kind(self, app):
        with pytest.raises(ValidationError):
            app.build_form("poll", {})

    def test_delete(self, app, services, output):
        session = app.delete_post("lost", 2)

        services['lost_found'].delete.assert_called_once_with(2)
        assert [item.id for item in session.items] == [1, 3]
        # Removed locally, the feed is not fetched again
        services['lost_found'].list_for_feed.assert_called_once()
        text = printed(output)
        assert "Deleted lost_found #2" in text
        assert "Blue wallet" not in text and "AI Workshop" in text

    def test_delete_someone_elses_post(self, app, services):
        services['events'].delete.side_effect = ForbiddenError("HTTP error! status: 403", status_code=403)

        with pytest.raises(ForbiddenError, match="only delete posts you created"):
            app.delete_post("event", 1)

    def test_respond_resolve_pin(self, app, services, event_json, lost_found_json, announcement_json, output):
        services['events'].add_response.return_value = Event.from_dict(event_json(userResponse="GOING"))
        services['lost_found'].resolve.return_value = LostFoundItem.from_dict(lost_found_json(isResolved=True))
        services['announcements'].toggle_pin.return_value = Announcement.from_dict(
            announcement_json(id=3, isPinned=True))

        app.respond(1, "going")
        app.resolve(2)
        app.pin(3)

        text = printed(output)
        assert "[Going]" in text
        assert "[RESOLVED]" in text
        assert "Pinned announcement #3" in text


class TestInteractionCommands:

    def test_show_comments(self, app, services, comment_json, output):
        services['comments'].get_for_post.return_value = [Comment.from_dict(comment_json())]
        services['comments'].get_count.return_value = 1

        app.show_comments("event", 1)

        services['comments'].get_for_post.assert_called_once_with(PostType.EVENT, 1)
        assert "See you there!" in printed(output)

    def test_reply(self, app, services, comment_json):
        services['comments'].add_reply.return_value = Comment.from_dict(comment_json(id=5, parentId=1))

        app.add_comment("event", 1, "Me too", reply_to=1)

        services['comments'].add_reply.assert_called_once_with(1, "Me too")
        services['comments'].add.assert_not_called()

    def test_toxic_comment_warning(self, app, services, comment_json, output):
        services['comments'].add.return_value = Comment.from_dict(comment_json(isToxic=True))

        app.add_comment("announcement", 3, "rude words")

        assert "flagged" in printed(output)

    def test_react_on_comment(self, app, services, output):
        services['reactions'].toggle_comment_reaction.return_value = ReactionResult("removed", ReactionType.LIKE)

        app.react("event", 1, "like", comment_id=4)

        services['reactions'].toggle_comment_reaction.assert_called_once_with(PostType.EVENT, 1, 4, "like")
        assert "Reaction like removed" in printed(output)

    def test_bad_post_type(self):
        with pytest.raises(ValidationError):
            parse_post_type("poll")


class TestOtherCommands:

    def test_search_dispatches_quick_filter(self, app, services, output):
        services['events'].get_upcoming.return_value = []

        app.search(upcoming=True)

        services['events'].get_upcoming.assert_called_once()
        assert "Upcoming events: nothing found" in printed(output)

    def test_dashboard(self, app, services, output):
        services['events'].get_statistics.return_value = MagicMock(total=1, upcoming=1, past=0)
        services['lost_found'].get_statistics.return_value = MagicMock(
            total=0, lost=0, found=0, resolved=0, unresolved=0)
        services['events'].get_today.return_value = []
        services['lost_found'].get_recent.return_value = []

        app.show_dashboard()

        assert "Dashboard" in printed(output)

    def test_run_checks(self, app, output):
        report = app.run_checks("health")
        assert isinstance(report, CheckReport)
        assert "2 passed, 0 failed, 2 total" in printed(output)

    def test_classify(self, app, services, output):
        services['ai'].classify_post.return_value = MagicMock(
            type="event", confidence=0.9, title="Hackathon", item_name=None,
            location="Hall", event_date=None, department=None)

        app.classify("Hackathon in the hall")

        assert "event post (90% confident)" in printed(output)

    def test_whoami(self, app, output):
        assert app.whoami() == DEVICE_ID
        assert DEVICE_ID in printed(output)


# =============================================================================
# CLI Tests
# =============================================================================

class TestArguments:

    def test_post_flags(self):
        args = parse_arguments(['post', 'event', '--title', 'T', '--date', '2025-04-01T09:00'])
        assert (args.command, args.kind, args.title, args.date) == ('post', 'event', 'T', '2025-04-01T09:00')

    def test_post_from_prompt(self):
        args = parse_arguments(['post', '--from-prompt', 'Found keys near the gym'])
        assert (args.kind, args.from_prompt) == (None, 'Found keys near the gym')

    def test_comment_reply(self):
        args = parse_arguments(['comment', 'event', '1', 'hello', '--reply-to', '3'])
        assert (args.id, args.text, args.reply_to) == (1, 'hello', 3)

    def test_global_flags(self):
        args = parse_arguments(['--no-color', '--log-level', 'DEBUG', 'whoami'])
        assert args.no_color and args.log_level == 'DEBUG'

    def test_unknown_filter_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments(['feed', '--filter', 'trending'])


class TestMain:

    def test_success_exit_code(self, app, tmp_path):
        assert main(['--log-file', str(tmp_path / 'log.txt'), 'whoami'], app=app) == 0

    def test_handled_error_exit_code(self, app, services, tmp_path, capsys):
        services['ai'].classify_post.side_effect = ValidationError("Prompt cannot be empty")

        code = main(['--log-file', str(tmp_path / 'log.txt'), 'classify', ' '], app=app)

        assert code == 1
        assert "Prompt cannot be empty" in capsys.readouterr().err

    def test_unexpected_error_exit_code(self, app, services, tmp_path):
        services['comments'].get_for_post.side_effect = RuntimeError("bug")

        assert main(['--log-file', str(tmp_path / 'log.txt'), 'comments', 'event', '1'], app=app) == 2

    def test_post_from_prompt_exit_code(self, app, services, lost_found_json, tmp_path):
        services['ai'].classify_post.return_value = ClassificationResult(
            type="found", confidence=0.95, item_name="Keys", location="Gym")
        services['lost_found'].create.return_value = LostFoundItem.from_dict(lost_found_json(id=5))

        code = main(['--log-file', str(tmp_path / 'log.txt'), 'post', '--from-prompt', 'Found keys near the gym'],
                    app=app)

        assert code == 0
        assert services['lost_found'].create.call_args.args[0]['type'] == "FOUND"

    def test_post_without_kind_or_prompt(self, app, tmp_path, capsys):
        assert main(['--log-file', str(tmp_path / 'log.txt'), 'post'], app=app) == 1
        assert "--from-prompt" in capsys.readouterr().err

    def test_no_color_flag(self, app, tmp_path):
        with patch('config.settings.USE_COLOR', True):
            main(['--no-color', '--log-file', str(tmp_path / 'log.txt'), 'whoami'], app=app)
            from config import settings
            assert settings.USE_COLOR is False
