# Role: Local developer CLI to drive SessionController without the web UI.
# Feed hand-written intents turn by turn and watch the routing decisions (set DEBUG=1 for traces).

from __future__ import annotations
import json
import uuid

import widget_router.config
widget_router.config.load_env()

from widget_router.config import RouterSettings
from widget_router.core.session_controller import SessionController
from widget_router.models.widget import InteractionType, WidgetKind

HELP = """Input formats:
  <intent> [confidence] [user message...]   e.g. provide_destination 90 je veux aller à Rome
  {"primaryIntent": "...", ...}              raw classifier JSON
Commands:
  /confirm <widget>   /dismiss <widget>   /typed <widget>
  /set key=value ...  (destination_city=Rome adults=2 departure_date=2026-07-01 trip_type=oneway)
  /state  /new  /session  /help  /exit"""


def _new_session_id() -> str:
    return str(uuid.uuid4())


def _parse_value(raw: str):
    return int(raw) if raw.isdigit() else raw


def _intent_from_line(line: str):
    # 1) JSON payload as-is
    # 2) "<intent> [confidence] [message]" shorthand
    if line.startswith("{"):
        return line, None

    parts = line.split(maxsplit=2)
    payload = {"primaryIntent": parts[0], "confidence": 100}
    rest = parts[1:]
    if rest:
        try:
            payload["confidence"] = float(rest[0])
            rest = rest[1:]
        except ValueError:
            rest = [" ".join(rest)]
    message = " ".join(rest) if rest else None
    return payload, message


def _widget_command(controller: SessionController, session_id: str, cmd: str, arg: str) -> None:
    kind = WidgetKind.parse(arg)
    if kind is None:
        print(f"Unknown widget: {arg!r}")
        return
    interaction_type = {
        "/confirm": InteractionType.WIDGET_CONFIRMED,
        "/dismiss": InteractionType.WIDGET_DISMISSED,
        "/typed": InteractionType.TYPED_INSTEAD,
    }[cmd]
    controller.record_interaction(session_id, interaction_type, widget_kind=kind)
    print(f"Recorded {interaction_type.value} for {kind.value}")


def main() -> None:
    # 1) Create SessionController
    # 2) Maintain a session_id across turns
    # 3) Route input -> SessionController -> print decision
    print("Widget Router CLI")
    print("Type /help for input formats")
    print("-" * 50)

    controller = SessionController(settings=RouterSettings.from_env())
    session_id = _new_session_id()
    print(f"session_id: {session_id}")

    while True:
        try:
            line = input("\nIntent: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue

        cmd, _, arg = line.partition(" ")
        cmd = cmd.lower()

        if cmd in {"/exit", "exit", "quit", "/quit"}:
            print("Bye!")
            return

        if cmd == "/help":
            print(HELP)
            continue

        if cmd in {"/new", "new"}:
            session_id = _new_session_id()
            print(f"New session_id: {session_id}")
            continue

        if cmd in {"/session", "session"}:
            print(f"session_id: {session_id}")
            continue

        if cmd == "/state":
            print(json.dumps(controller.snapshot(session_id), indent=2, default=str, ensure_ascii=False))
            continue

        if cmd in {"/confirm", "/dismiss", "/typed"}:
            _widget_command(controller, session_id, cmd, arg.strip())
            continue

        if cmd == "/set":
            updates = {}
            for pair in arg.split():
                key, sep, value = pair.partition("=")
                if sep:
                    updates[key] = _parse_value(value)
            flow = controller.update_memory(session_id, updates)
            print(f"Flow state: {flow.model_dump(mode='json')}")
            continue

        intent, message = _intent_from_line(line)
        result = controller.route_turn(session_id, intent, user_message=message)
        decision = result.decision
        if decision.should_show_widget:
            print(f"\nShow widget: {decision.widget_kind.value} (reason: {decision.reason})")
            if decision.widget_data:
                print(f"  data: {decision.widget_data}")
        else:
            print(f"\nAction: {decision.action.value} (reason: {decision.reason})")
        if result.next_required_widget:
            print(f"Next required: {result.next_required_widget.value}")


if __name__ == "__main__":
    main()
