"""Prompt builders for satellite disaster classification."""

def build_system_prompt() -> str:
    """Return the system prompt for the classifier."""
    return (
        "You are a remote-sensing analyst supporting emergency responders. "
        "You are careful and conservative, and you only report indicators that are visible in the image. "
        "Always answer by calling the provided function."
    )


def build_user_prompt() -> str:
    """Return the fixed instruction describing the target classes."""
    return (
        "Analyze this satellite image for environmental disasters. "
        "Identify if it shows a Forest Fire (smoke plumes, active flame fronts, burn scars), "
        "a Tsunami (coastal inundation, massive receding water, destroyed infrastructure), "
        "or if it is a Normal landscape (standard urban, forest, or ocean patterns)."
    )
