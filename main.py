"""Simple entrypoint to print today's closet recommendation locally."""

from closet_app.app import VirtualClosetApp


def main() -> None:
    app = VirtualClosetApp()
    user = app.restore_session()
    if user is None:
        print("No signed-in user on this device. Start the API with `python -m server.api` and sign up.")
        return
    plan = app.orchestrator.plan_home()
    weather = plan["weather"]
    print(f"Hello {user.name}: {weather['condition']} weather, dress for {weather['suggested_weather_tag']}.")
    if weather["error"]:
        print(weather["error"])
    for kind in ("tops", "bottoms"):
        names = [item.name or item.color or item.id for item in plan[kind]]
        print(f"{kind.title()}: {', '.join(names) if names else plan['messages'][kind]}")


if __name__ == "__main__":
    main()
