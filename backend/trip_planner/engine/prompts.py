"""Prompt builders for each planning stage.

Pure functions: stage inputs in, instruction text out. Optional metadata is
rendered only when present; absent fields are omitted entirely.
"""

from backend.trip_planner.models.engine import (
    DestinationOption,
    GenerationMetadata,
    PlanOption,
    TimelineRow,
    TripEngineState,
)

PLAN_TEMPLATES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        "A",
        "Relaxed/Cultural Focus",
        (
            "Slower pace with more time at each location",
            "Emphasis on cultural immersion and local experiences",
            "More downtime and flexibility",
            "Suitable for those who want to absorb the destination deeply",
        ),
    ),
    (
        "B",
        "Balanced/Highlights Focus",
        (
            "Moderate pace covering major attractions",
            "Mix of must-see sights and local experiences",
            "Good balance of activity and rest",
            "Most comprehensive coverage of destination highlights",
        ),
    ),
    (
        "C",
        "Adventurous/Intensive Focus",
        (
            "Faster pace with packed schedule",
            "Maximum experiences and activities",
            "Early starts and full days",
            "For travelers who want to see and do as much as possible",
        ),
    ),
)


def _preference_lines(metadata: GenerationMetadata, include_style: bool = True) -> list[str]:
    """Render budget, style, interests, travelers and requirements blocks."""
    lines: list[str] = []

    if metadata.budget:
        lines.extend([f"Budget: {metadata.budget}", ""])

    if include_style and metadata.travel_style:
        lines.extend([f"Preferred Travel Style: {metadata.travel_style}", ""])

    if metadata.interests:
        lines.extend([f"Interests: {', '.join(metadata.interests)}", ""])

    travelers = metadata.travelers
    if travelers:
        lines.append("Travelers:")
        if travelers.adults:
            lines.append(f"- Adults: {travelers.adults}")
        if travelers.children:
            lines.append(f"- Children: {travelers.children}")
        if travelers.seniors:
            lines.append(f"- Seniors: {travelers.seniors}")
        lines.append("")

    if metadata.special_requirements:
        lines.extend(
            [f"Special Requirements: {', '.join(metadata.special_requirements)}", ""]
        )

    return lines


def build_destination_prompt(user_input: str, metadata: GenerationMetadata | None = None) -> str:
    """Build the prompt asking for 5 destination options.

    The prompt always carries both branches of the specific-place rule; the
    model decides which applies to the user's input.
    """
    metadata = metadata or GenerationMetadata()

    lines = [
        "You are an expert travel planner. Based on the user's input and preferences, "
        "suggest 5 destination options.",
        "",
        f'User Input: "{user_input}"',
        "",
        "**CRITICAL**: Analyze the user input carefully:",
        "1. If the user names a SPECIFIC DESTINATION (a city, country or region such as "
        '"Paris", "Japan", "Hawaii", "Hong Kong", "Bali"):',
        '   - The FIRST option (id: "1") MUST be that exact destination',
        "   - Options 2-5 should be DIFFERENT AREAS or NEIGHBORHOODS within that same "
        "destination, OR very similar alternatives nearby",
        '   - Example: for "Hong Kong", option 1 = Hong Kong (general), options 2-5 = '
        "Hong Kong Island, Kowloon, Lantau Island, or nearby Macau/Shenzhen",
        "",
        "2. If the user gives a GENERAL description (such as \"somewhere warm\", "
        '"beach vacation", "a trip around Europe"):',
        "   - Suggest 5 diverse destinations that match the criteria",
        "   - Vary by budget, style, and specific attractions",
        "",
    ]

    if metadata.start_date or metadata.end_date or metadata.number_of_days:
        lines.append("Travel Dates:")
        if metadata.start_date:
            lines.append(f"- Start: {metadata.start_date}")
        if metadata.end_date:
            lines.append(f"- End: {metadata.end_date}")
        if metadata.number_of_days:
            lines.append(f"- Duration: {metadata.number_of_days} days")
        lines.append("")

    lines.extend(_preference_lines(metadata))

    lines.extend(
        [
            "Requirements:",
            "- Generate exactly 5 destination options",
            "- RESPECT the user's specific destination request if one is given",
            "- Include varied budget levels and travel styles",
            "- Consider the travel dates and climate",
            "- Provide practical budget estimates using $ symbols ($, $$, $$$)",
            "- Make each destination unique and appealing",
            "- Include specific details about what makes each destination special",
            "- Consider the traveler composition (families, couples, solo, groups, etc.)",
            "",
            "For each destination, provide:",
            "- A unique ID (1, 2, 3, 4, 5)",
            "- Name and country",
            "- Compelling description (2-3 sentences)",
            "- What it's best for (tags like 'beaches', 'culture', 'adventure', 'food', "
            "'nightlife', 'nature', 'history', 'relaxation')",
            "- Estimated budget level",
            "- Climate conditions during the travel period",
            "- Optional image URL (can use placeholder)",
            "",
            "Make the descriptions engaging and informative, highlighting unique selling points.",
        ]
    )

    return "\n".join(lines)


def build_plan_prompt(
    destination: DestinationOption, metadata: GenerationMetadata | None = None
) -> str:
    """Build the prompt asking for the three fixed-theme plans (A/B/C)."""
    metadata = metadata or GenerationMetadata()

    lines = [
        "You are an expert travel planner. Create 3 distinct trip plan options (A, B, C) "
        "for the following destination.",
        "",
        f"Destination: {destination.name}, {destination.country}",
        f"Description: {destination.description}",
        f"Best For: {', '.join(destination.best_for)}",
        f"Climate: {destination.climate}",
        "",
    ]

    if metadata.number_of_days:
        lines.extend([f"Trip Duration: {metadata.number_of_days} days", ""])

    lines.extend(_preference_lines(metadata))

    lines.append("Create 3 distinctly different plan options:")
    lines.append("")
    for plan_id, theme, traits in PLAN_TEMPLATES:
        lines.append(f"Plan {plan_id}: {theme}")
        lines.extend(f"- {trait}" for trait in traits)
        lines.append("")

    lines.extend(
        [
            "For each plan, provide:",
            "- ID (A, B, or C)",
            "- Catchy title that captures the plan's essence",
            "- Detailed description (3-4 sentences) explaining the approach and philosophy",
            "- Travel style descriptor",
            "- Daily pace descriptor",
            "- 5-8 key highlights and activities included",
            "- Estimated cost range",
            "- Target audience (who this plan is perfect for)",
            "",
            "Make each plan distinct and appealing to different types of travelers. "
            "Consider the destination's strengths and the user's preferences.",
        ]
    )

    return "\n".join(lines)


def build_timeline_prompt(
    destination: DestinationOption,
    plan: PlanOption,
    metadata: GenerationMetadata | None = None,
) -> str:
    """Build the prompt asking for a full day-by-day timeline plus summary."""
    metadata = metadata or GenerationMetadata()

    lines = [
        "You are an expert travel planner. Create a detailed day-by-day timeline for the "
        "following trip.",
        "",
        f"Destination: {destination.name}, {destination.country}",
        f"Plan: {plan.title} ({plan.id})",
        f"Plan Description: {plan.description}",
        f"Style: {plan.style}",
        f"Pace: {plan.pace}",
        f"Key Highlights: {', '.join(plan.highlights)}",
        "",
    ]

    if metadata.start_date:
        lines.append(f"Start Date: {metadata.start_date}")
    if metadata.end_date:
        lines.append(f"End Date: {metadata.end_date}")
    if metadata.number_of_days:
        lines.append(f"Duration: {metadata.number_of_days} days")
    lines.append("")

    # Travel style is already fixed by the chosen plan
    lines.extend(_preference_lines(metadata, include_style=False))

    lines.extend(
        [
            "Create a detailed timeline with the following requirements:",
            "",
            "1. **Comprehensive Coverage**: Include all activities from arrival to departure",
            "2. **Time Slots**: Specify realistic time ranges for each activity "
            '(e.g., "09:00-12:00", "Morning", "Afternoon", "Evening")',
            "3. **Locations**: Provide specific venue names, addresses, and coordinates "
            "where possible",
            "4. **Categories**: Classify activities (Sightseeing, Food, Transport, "
            "Accommodation, Activity, Shopping, Culture, Nature, etc.)",
            "5. **Logistics**: Include transport information between locations "
            "(method, duration, cost)",
            "6. **Practical Details**:",
            "   - Estimated costs for each activity",
            "   - Duration of activities",
            "   - Booking requirements",
            "   - Helpful tips and insider advice",
            "   - Opening hours considerations",
            "   - Best times to visit",
            "",
            "7. **Flow and Pacing**:",
            "   - Ensure logical geographic flow to minimize backtracking",
            f"   - Match the pace specified in the plan ({plan.pace})",
            "   - Include appropriate breaks and meal times",
            "   - Consider travel time between locations",
            "   - Factor in jet lag for first day if international travel",
            "",
            "8. **Variety**: Mix different types of activities",
            "   - Morning activities (when places are less crowded)",
            "   - Afternoon experiences",
            "   - Evening entertainment",
            "   - Meal recommendations",
            "   - Rest periods",
            "",
            "9. **Realism**:",
            "   - Account for actual opening/closing times",
            "   - Include realistic travel times",
            "   - Don't over-schedule",
            "   - Build in buffer time",
            "",
            "10. **Summary**: Provide trip overview with:",
            "    - Total days and activities",
            "    - Overall estimated cost",
            "    - Key highlights not to miss",
            "",
            "Make this timeline actionable and ready to use. Include enough detail that a "
            "traveler could follow it without additional research.",
        ]
    )

    return "\n".join(lines)


def group_timeline_by_day(timeline: list[TimelineRow]) -> dict[int, list[TimelineRow]]:
    """Group rows by day, keeping days in order of first appearance."""
    groups: dict[int, list[TimelineRow]] = {}
    for row in timeline:
        groups.setdefault(row.day, []).append(row)
    return groups


def build_refinement_prompt(state: TripEngineState, user_message: str) -> str:
    """Build the prompt for a conversational refinement of the current timeline.

    The whole timeline is serialized, grouped by day, so the model can return a
    complete replacement when it decides to change something.
    """
    destination = state.destination
    plan = state.plan
    summary = state.summary

    lines = [
        "You are an expert travel planner helping refine a trip itinerary. The user wants "
        "to make changes or ask questions.",
        "",
        "**Current Trip Details:**",
        f"Destination: {destination.name}, {destination.country}",
        f"Plan: {plan.title} ({plan.style}, {plan.pace})",
        f"Duration: {summary.total_days} days",
        f"Total Activities: {summary.total_activities}",
        "",
        "**User's Request:**",
        f'"{user_message}"',
        "",
        "**Current Timeline Summary:**",
    ]

    for day, rows in group_timeline_by_day(state.timeline).items():
        lines.append("")
        lines.append(f"Day {day} ({rows[0].date}):")
        for row in rows:
            lines.append(
                f"- {row.time_slot}: {row.activity} at {row.location.name} ({row.category})"
            )

    lines.extend(
        [
            "",
            "",
            "**Your Task:**",
            "",
            "1. **Understand the Request**: Analyze what the user wants to change, add, "
            "remove, or learn about",
            "2. **Make Appropriate Changes**: If the request involves modifications:",
            "   - Update the timeline accordingly",
            "   - Maintain logical flow and realistic timing",
            "   - Adjust subsequent activities if needed",
            "   - Keep the overall plan style and pace",
            "   - Ensure geographic coherence",
            "",
            "3. **Provide Context**: Explain what changes you're making and why",
            "4. **Offer Suggestions**: Recommend related improvements or alternatives",
            "5. **Ask Clarifying Questions**: If the request is ambiguous, ask for "
            "clarification",
            "",
            "**Response Requirements:**",
            "- **response**: Natural, conversational explanation of what you understood "
            "and what you're doing",
            "- **updated_timeline**: The modified timeline array (ONLY if changes were made, "
            "otherwise null)",
            "- **suggested_actions**: 2-4 follow-up suggestions or questions for the user",
            "- **changes_summary**: Brief summary of specific changes made (if any)",
            "",
            "**Important Guidelines:**",
            "- If just answering a question without changes: return null for "
            "updated_timeline",
            "- If making changes: return the COMPLETE updated timeline, not just the "
            "changed items",
            "- Maintain all IDs for unchanged items",
            '- Generate new IDs for new items (format: "timeline-{day}-{sequence}")',
            "- Keep date format consistent (YYYY-MM-DD)",
            "- Preserve the existing structure and detail level",
            "- If removing activities, adjust timing of subsequent activities",
            "- If adding activities, ensure realistic time allocation",
            "",
            "Be helpful, knowledgeable, and maintain the quality and detail of the "
            "original plan.",
        ]
    )

    return "\n".join(lines)
