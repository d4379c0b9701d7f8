"""
Campus Feed Application

This is the main entry point for the Campus Feed terminal client.
It shows the merged campus feed, creates and deletes posts, handles
comments and reactions, and runs searches, the dashboard and the
backend smoke checks.

Version: 1.0
"""

import sys
import argparse
import logging
from typing import Optional, Callable, Dict, Any

from config import settings
from config.validators import validate_settings, get_config_summary, VALID_LOG_LEVELS
from utils.logger import get_logger, setup_file_logging
from utils.exceptions import CampusFeedError, ForbiddenError, ValidationError
from data.device import DeviceIdStore
from data.models import PostType
from services.api_client import ApiClient
from services.events_service import EventsService
from services.lost_found_service import LostFoundService
from services.announcements_service import AnnouncementsService
from services.comments_service import CommentsService
from services.reactions_service import ReactionsService
from services.ai_service import AIService
from services.feed_service import FeedService, FeedSession
from services.search_service import SearchService
from services.dashboard_service import DashboardService
from services.api_check_service import ApiCheckService
from views import feed_view
from views.components import Navigation
from views.forms import EventForm, LostFoundForm, AnnouncementForm, form_from_classification

# Set up logging
logger = get_logger(__name__)

COMMANDS = ["feed", "post", "search", "dashboard", "check", "whoami"]
POST_ACTIONS = ["comments", "react", "delete"]


def parse_post_type(value: str) -> PostType:
    try:
        return PostType.parse(value)
    except ValueError:
        raise ValidationError(f"Unknown post type '{value}'. Use event, lost_found or announcement")


class CampusFeed:
    """
    Main application class for the Campus Feed client.

    This class wires the services together and implements one method per
    command. Services can be injected for testing; anything not supplied is
    built from the settings.
    """

    def __init__(self, client: Optional[ApiClient] = None, device: Optional[DeviceIdStore] = None,
                 events=None, lost_found=None, announcements=None, comments=None,
                 reactions=None, ai=None, out: Callable[[str], Any] = print,
                 input_func: Callable[[str], str] = input, validate: bool = True):
        """Initialize the Campus Feed application."""
        # Validate settings
        if validate:
            validate_settings()

        self.client = client or ApiClient()
        self.device = device or DeviceIdStore.from_settings()
        self.out = out
        self.input_func = input_func

        # Initialize services
        self.events = events or EventsService(self.client, self.device)
        self.lost_found = lost_found or LostFoundService(self.client, self.device)
        self.announcements = announcements or AnnouncementsService(self.client, self.device)
        self.comments = comments or CommentsService(self.client, self.device)
        self.reactions = reactions or ReactionsService(self.client, self.device)
        self.ai = ai or AIService(self.client)

        self.sources = {
            PostType.EVENT: self.events,
            PostType.LOST_FOUND: self.lost_found,
            PostType.ANNOUNCEMENT: self.announcements,
        }
        self.feed = FeedService(self.sources, self.device)
        self.search_service = SearchService(self.events, self.lost_found)
        self.dashboard = DashboardService(self.events, self.lost_found)
        self.checks = ApiCheckService(self.events, self.lost_found)

    @property
    def device_id(self) -> str:
        return self.device.get_device_id()

    # -------------------------------------------------------------------------
    # Feed and posts
    # -------------------------------------------------------------------------

    def show_feed(self, feed_filter: Optional[str] = None, with_reactions: bool = False) -> FeedSession:
        """
        Load and print the feed.

        Args:
            feed_filter: all, events, lost_found, announcements or my_posts
            with_reactions: Also fetch and show each post's reactions

        Returns:
            FeedSession: The loaded session
        """
        session = FeedSession(self.feed, feed_filter)
        session.reload()

        counts = {name: session.filter_count(name) for name in settings.FEED_FILTERS}
        self.out(Navigation(COMMANDS, current="feed").render())
        self.out(feed_view.render_filter_tabs(session.filter, counts))
        self.out("")

        if not with_reactions or not session.items:
            self.out(feed_view.render_feed(session.items, device_id=self.device_id))
        else:
            cards = []
            for item in session.items:
                try:
                    summary = self.reactions.get_post_reactions(item.post_type, item.id)
                except CampusFeedError as e:
                    logger.warning(f"Could not load reactions for {item.post_type.value} {item.id}: {e}")
                    summary = None
                cards.append(feed_view.render_feed_item(item, device_id=self.device_id, reactions=summary))
            self.out("\n\n".join(cards))

        if session.items:
            self.out("")
            self.out(feed_view.render_actions(POST_ACTIONS))
        return session

    def build_form(self, kind: str, fields: Dict[str, Any], interactive: bool = False):
        """
        Build the creation form for a post kind from flags or prompts.

        Args:
            kind: event, lost, found or announcement
            fields: Values from the command line, keyed by form field name
            interactive: Prompt for every field instead of using the flags
        """
        kind = kind.lower()
        if kind == "event":
            if interactive:
                return EventForm.from_prompts(self.input_func)
            return EventForm(title=fields.get("title") or "",
                             description=fields.get("description") or "",
                             location=fields.get("location") or "",
                             event_date=fields.get("date"),
                             image_url=fields.get("image_url"))
        if kind in ("lost", "found"):
            if interactive:
                return LostFoundForm.from_prompts(kind.upper(), self.input_func)
            return LostFoundForm(item_name=fields.get("item_name") or fields.get("title") or "",
                                 description=fields.get("description") or "",
                                 location=fields.get("location") or "",
                                 type=kind.upper(),
                                 incident_date=fields.get("date"),
                                 contact_info=fields.get("contact"),
                                 image_url=fields.get("image_url"))
        if kind == "announcement":
            if interactive:
                return AnnouncementForm.from_prompts(self.input_func)
            return AnnouncementForm(title=fields.get("title") or "",
                                    content=fields.get("content") or fields.get("description") or "",
                                    department=fields.get("department") or "",
                                    type=fields.get("type") or "GENERAL",
                                    priority=fields.get("priority") or "MEDIUM",
                                    attachment_url=fields.get("attachment_url"),
                                    attachment_name=fields.get("attachment_name"),
                                    expiry_date=fields.get("expires"))
        raise ValidationError(f"Unknown post kind '{kind}'. Use event, lost, found or announcement")

    def create_post(self, kind: str, fields: Dict[str, Any], interactive: bool = False):
        return self._submit(self.build_form(kind, fields, interactive))

    def create_from_prompt(self, prompt: str, kind: Optional[str] = None):
        """
        Create a post from free text: classify it, pre-fill the matching form,
        ask for whatever is still missing and submit.

        Args:
            prompt: What the user wants to post, in their own words
            kind: Post kind to use instead of the classified one

        Returns:
            The created record
        """
        result = self.classify(prompt)
        form = form_from_classification(result, prompt, kind)
        missing = form.missing_fields()
        if missing:
            logger.debug(f"Prompting for {', '.join(name for name, _ in missing)}")
            form.prompt_missing(self.input_func)
        return self._submit(form)

    def _submit(self, form):
        session = FeedSession(self.feed)
        record = session.create_post(form)
        logger.info(f"Created {form.post_type.value} {record.id}")
        self.out(f"Posted! ({form.post_type.value} #{record.id})")
        self.out(feed_view.render_feed(session.items, device_id=self.device_id))
        return record

    def delete_post(self, post_type: str, post_id: int) -> FeedSession:
        post_type = parse_post_type(post_type)
        session = FeedSession(self.feed)
        session.reload()
        try:
            session.delete_post(post_type, post_id)
        except ForbiddenError as e:
            raise ForbiddenError("You can only delete posts you created",
                                 status_code=e.status_code, method=e.method, url=e.url) from e
        self.out(f"Deleted {post_type.value} #{post_id}")
        self.out(feed_view.render_feed(session.items, device_id=self.device_id))
        return session

    def respond(self, event_id: int, response: str):
        event = self.events.add_response(event_id, response)
        self.out(feed_view.render_event(event, device_id=self.device_id))
        return event

    def resolve(self, item_id: int):
        item = self.lost_found.resolve(item_id)
        self.out(feed_view.render_lost_found(item, device_id=self.device_id))
        return item

    def pin(self, announcement_id: int):
        announcement = self.announcements.toggle_pin(announcement_id)
        state = "Pinned" if announcement.is_pinned else "Unpinned"
        self.out(f"{state} announcement #{announcement.id}")
        return announcement

    # -------------------------------------------------------------------------
    # Comments and reactions
    # -------------------------------------------------------------------------

    def show_comments(self, post_type: str, post_id: int):
        post_type = parse_post_type(post_type)
        comments = self.comments.get_for_post(post_type, post_id)
        count = self.comments.get_count(post_type, post_id)
        self.out(f"💬 {count} comments on {post_type.value} #{post_id}")
        self.out(feed_view.render_comments(comments, device_id=self.device_id))
        return comments

    def add_comment(self, post_type: str, post_id: int, text: str, reply_to: Optional[int] = None):
        post_type = parse_post_type(post_type)
        if reply_to:
            comment = self.comments.add_reply(reply_to, text)
        else:
            comment = self.comments.add(post_type, post_id, text)
        self.out(f"Comment #{comment.id} added")
        if comment.is_toxic:
            self.out("⚠ This comment was flagged as potentially inappropriate")
        return comment

    def react(self, post_type: str, post_id: int, reaction: str, comment_id: Optional[int] = None):
        post_type = parse_post_type(post_type)
        if comment_id:
            result = self.reactions.toggle_comment_reaction(post_type, post_id, comment_id, reaction)
        else:
            result = self.reactions.toggle_post_reaction(post_type, post_id, reaction)
        name = result.reaction_type.value.lower() if result.reaction_type else reaction
        self.out(f"Reaction {name} {result.action}")
        return result

    def show_reactions(self, post_type: str, post_id: int, comment_id: Optional[int] = None):
        post_type = parse_post_type(post_type)
        if comment_id:
            summary = self.reactions.get_comment_reactions(post_type, post_id, comment_id)
        else:
            summary = self.reactions.get_post_reactions(post_type, post_id)
        self.out(feed_view.render_reaction_bar(summary))
        return summary

    # -------------------------------------------------------------------------
    # Search, dashboard, checks
    # -------------------------------------------------------------------------

    def search(self, term: Optional[str] = None, location: Optional[str] = None,
               user: Optional[str] = None, upcoming: bool = False,
               unresolved: bool = False, today: bool = False):
        if location:
            results, label = self.search_service.by_location(location), f"Events at '{location}'"
        elif user:
            results, label = self.search_service.user_content(user), f"Posts by {user}"
        elif upcoming:
            results, label = self.search_service.upcoming_events(), "Upcoming events"
        elif unresolved:
            results, label = self.search_service.unresolved_items(), "Unresolved items"
        elif today:
            results, label = self.search_service.today_events(), "Today's events"
        else:
            results, label = self.search_service.search(term or ""), f"Results for '{term or ''}'"
        self.out(feed_view.render_search_results(results, label))
        return results

    def show_dashboard(self):
        data = self.dashboard.load()
        frame = self.dashboard.stats_frame(data)
        self.out(feed_view.render_dashboard(data, frame))
        return data

    def run_checks(self, category: str = "all"):
        report = self.checks.run(category)
        self.out(feed_view.render_check_report(report))
        return report

    # -------------------------------------------------------------------------
    # AI helpers and identity
    # -------------------------------------------------------------------------

    def classify(self, prompt: str):
        result = self.ai.classify_post(prompt)
        self.out(f"Looks like a{'n' if result.type[:1] in 'aeiou' else ''} {result.type or 'unknown'} "
                 f"post ({result.confidence:.0%} confident)")
        for label, value in (("Title", result.title), ("Item", result.item_name),
                             ("Location", result.location), ("Date", result.event_date),
                             ("Department", result.department)):
            if value:
                self.out(f"  {label}: {value}")
        return result

    def check_toxicity(self, content: str):
        result = self.ai.check_toxicity(content)
        if result.is_toxic:
            self.out(f"⚠ Potentially inappropriate ({result.toxicity_score:.0%})")
            if result.suggestion:
                self.out(f"  Suggestion: {result.suggestion}")
        else:
            self.out(f"Looks fine ({result.toxicity_score:.0%})")
        return result

    def generate_meme(self, prompt: str):
        result = self.ai.generate_meme(prompt)
        self.out(result.image_url or "No image returned")
        return result

    def whoami(self) -> str:
        self.out(f"Device id: {self.device_id}")
        summary = get_config_summary()
        self.out(f"Backend: {summary['backend']['base_url']}")
        return self.device_id

    def dispatch(self, args: argparse.Namespace):
        """Run the command named by parsed arguments."""
        command = args.command
        if command == "feed":
            return self.show_feed(args.filter, with_reactions=args.with_reactions)
        if command == "post":
            if args.from_prompt:
                return self.create_from_prompt(args.from_prompt, kind=args.kind)
            if not args.kind:
                raise ValidationError("Pass the kind of post (event, lost, found or announcement) "
                                      "or --from-prompt")
            fields = {name: getattr(args, name) for name in POST_FIELDS}
            return self.create_post(args.kind, fields, interactive=args.interactive)
        if command == "delete":
            return self.delete_post(args.type, args.id)
        if command == "respond":
            return self.respond(args.event_id, args.response)
        if command == "resolve":
            return self.resolve(args.item_id)
        if command == "pin":
            return self.pin(args.announcement_id)
        if command == "comments":
            return self.show_comments(args.type, args.id)
        if command == "comment":
            return self.add_comment(args.type, args.id, args.text, reply_to=args.reply_to)
        if command == "react":
            return self.react(args.type, args.id, args.reaction, comment_id=args.comment)
        if command == "reactions":
            return self.show_reactions(args.type, args.id, comment_id=args.comment)
        if command == "search":
            return self.search(args.term, location=args.location, user=args.user,
                               upcoming=args.upcoming, unresolved=args.unresolved, today=args.today)
        if command == "dashboard":
            return self.show_dashboard()
        if command == "check":
            return self.run_checks(args.category)
        if command == "classify":
            return self.classify(args.prompt)
        if command == "toxicity":
            return self.check_toxicity(args.text)
        if command == "meme":
            return self.generate_meme(args.prompt)
        if command == "whoami":
            return self.whoami()
        raise ValidationError(f"Unknown command: {command}")


POST_FIELDS = ["title", "description", "content", "location", "date", "item_name", "contact",
               "image_url", "department", "type", "priority", "attachment_url",
               "attachment_name", "expires"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Campus Feed terminal client')
    parser.add_argument('--log-file', type=str, default=settings.LOG_FILE, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=VALID_LOG_LEVELS,
                        default=settings.LOG_LEVEL if settings.LOG_LEVEL in VALID_LOG_LEVELS else 'INFO',
                        help='Logging level')
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colours')
    sub = parser.add_subparsers(dest='command', required=True)

    feed = sub.add_parser('feed', help='Show the feed')
    feed.add_argument('--filter', default=None, choices=settings.FEED_FILTERS)
    feed.add_argument('--with-reactions', action='store_true', help="Show each post's reactions")

    post = sub.add_parser('post', help='Create a post')
    post.add_argument('kind', nargs='?', default=None, choices=['event', 'lost', 'found', 'announcement'])
    post.add_argument('--interactive', '-i', action='store_true', help='Prompt for every field')
    post.add_argument('--from-prompt', metavar='TEXT',
                      help='Describe the post in your own words and let the backend fill the form')
    post.add_argument('--title')
    post.add_argument('--description')
    post.add_argument('--content')
    post.add_argument('--location')
    post.add_argument('--date', help='Event or incident date, YYYY-MM-DDTHH:MM')
    post.add_argument('--item-name')
    post.add_argument('--contact')
    post.add_argument('--image-url')
    post.add_argument('--department')
    post.add_argument('--type', help='Announcement type')
    post.add_argument('--priority')
    post.add_argument('--attachment-url')
    post.add_argument('--attachment-name')
    post.add_argument('--expires', help='Announcement expiry, YYYY-MM-DDTHH:MM')

    delete = sub.add_parser('delete', help='Delete one of your posts')
    delete.add_argument('type')
    delete.add_argument('id', type=int)

    respond = sub.add_parser('respond', help='Respond to an event')
    respond.add_argument('event_id', type=int)
    respond.add_argument('response', help='going, interested or not_going')

    resolve = sub.add_parser('resolve', help='Mark a lost & found item resolved')
    resolve.add_argument('item_id', type=int)

    pin = sub.add_parser('pin', help='Pin or unpin an announcement')
    pin.add_argument('announcement_id', type=int)

    comments = sub.add_parser('comments', help="Show a post's comments")
    comments.add_argument('type')
    comments.add_argument('id', type=int)

    comment = sub.add_parser('comment', help='Comment on a post')
    comment.add_argument('type')
    comment.add_argument('id', type=int)
    comment.add_argument('text')
    comment.add_argument('--reply-to', type=int, default=None, help='Comment id to reply to')

    react = sub.add_parser('react', help='Toggle a reaction')
    react.add_argument('type')
    react.add_argument('id', type=int)
    react.add_argument('reaction', help='like, love, laugh, wow, sad or angry')
    react.add_argument('--comment', type=int, default=None, help='React to this comment instead')

    reactions = sub.add_parser('reactions', help='Show reactions')
    reactions.add_argument('type')
    reactions.add_argument('id', type=int)
    reactions.add_argument('--comment', type=int, default=None)

    search = sub.add_parser('search', help='Search events and lost & found items')
    search.add_argument('term', nargs='?', default=None)
    search.add_argument('--location')
    search.add_argument('--user')
    search.add_argument('--upcoming', action='store_true')
    search.add_argument('--unresolved', action='store_true')
    search.add_argument('--today', action='store_true')

    sub.add_parser('dashboard', help='Show statistics and API health')

    check = sub.add_parser('check', help='Run the backend endpoint checks')
    check.add_argument('--category', default='all', choices=['all', 'health', 'events', 'lostfound'])

    classify = sub.add_parser('classify', help='Ask the backend what kind of post a text is')
    classify.add_argument('prompt')

    toxicity = sub.add_parser('toxicity', help='Check text for toxicity')
    toxicity.add_argument('text')

    meme = sub.add_parser('meme', help='Generate a meme image')
    meme.add_argument('prompt')

    sub.add_parser('whoami', help='Show this device id')
    return parser


def parse_arguments(argv=None):
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def main(argv=None, app: Optional[CampusFeed] = None):
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_arguments(argv)

    if args.no_color:
        settings.USE_COLOR = False

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.debug(f"Running command: {args.command}")

    try:
        app = app or CampusFeed()
        app.dispatch(args)
        exit_code = 0
    except CampusFeedError as e:
        logger.debug(f"Command {args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    except Exception as e:
        logger.error(f"Unhandled exception in Campus Feed: {e}", exc_info=True)
        exit_code = 2

    logger.debug(f"Campus Feed finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
