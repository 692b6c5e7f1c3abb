"""Home-screen orchestration: weather context plus recommended clothing."""

from __future__ import annotations

from datetime import date
import logging
from typing import Any, Dict

from closet_app.logging_config import get_logger, log_event, operation_context
from agents.closet_agent import ClosetAgent
from agents.weather_agent import WeatherAgent
from logic.recommendation import empty_state_message, recommend
from logic.validation import SlotQuery, parse_input
from logic.weather_rules import classify_condition, suggest_seasonal_tag


LOGGER = get_logger(__name__)


class OrchestratorAgent:
    """Joins the weather agent's state with the closet at recommendation time."""

    def __init__(self, closet_agent: ClosetAgent, weather_agent: WeatherAgent) -> None:
        self.closet_agent = closet_agent
        self.weather_agent = weather_agent

    def plan_home(self, day: str = "today", time_of_day: str = "morning", today: date | None = None) -> Dict[str, Any]:
        """Recommend tops and bottoms for the selected day and time of day.

        The seasonal tag comes from the temperature of the forecast entry
        covering the selected slot when one exists, so planning Wednesday
        night can suggest winter clothes on a warm afternoon. Without a slot
        the tag follows current conditions, and ``inbetween`` when no weather
        has loaded. ``weather.source`` reports which of the three was used.
        """

        query = parse_input(SlotQuery, {"day": day, "time_of_day": time_of_day})
        with operation_context("agent:orchestrator.plan_home") as correlation_id:
            slot = self.weather_agent.forecast_for_slot(query.day, query.time_of_day, today=today)
            if slot is not None:
                tag = suggest_seasonal_tag(slot.temperature)
                condition = classify_condition(slot.condition_code)
                source = "forecast"
            else:
                tag = self.weather_agent.suggested_weather_tag
                condition = self.weather_agent.weather_condition
                source = "current" if self.weather_agent.current else "default"

            recommendation = recommend(self.closet_agent.clothing_items, tag)
            response = {
                "status": "ok",
                "day": query.day,
                "time_of_day": query.time_of_day,
                "weather": {
                    "current": self.weather_agent.current,
                    "slot": slot,
                    "condition": condition,
                    "suggested_weather_tag": tag,
                    "source": source,
                    "error": self.weather_agent.error,
                },
                "tops": recommendation.tops,
                "bottoms": recommendation.bottoms,
                "messages": {
                    "tops": None if recommendation.tops else empty_state_message("tops", tag),
                    "bottoms": None if recommendation.bottoms else empty_state_message("bottoms", tag),
                },
            }
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="orchestrator",
                method="plan_home",
                correlation_id=correlation_id,
                seasonal_tag=tag,
                tag_source=source,
                tops=len(recommendation.tops),
                bottoms=len(recommendation.bottoms),
            )
            return response


__all__ = ["OrchestratorAgent"]
