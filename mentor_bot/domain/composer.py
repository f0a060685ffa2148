"""Outgoing message texts."""

from typing import Optional

MISSING_LINK_PLACEHOLDER = "(посилання не налаштоване)"

APOLOGY_TEXT = "Сталася помилка при обробці повідомлення. Спробуйте ще раз, будь ласка."


def role_mention(role_id: str) -> str:
    return f"<@&{role_id}>"


def _link(share_url: Optional[str]) -> str:
    return share_url or MISSING_LINK_PLACEHOLDER


def compose_out_of_hours_reply(
    author_mention: str,
    local_time_str: str,
    share_url: Optional[str],
    on_duty_role_id: Optional[str] = None,
) -> str:
    """Channel reply sent when the mentor role is mentioned outside work hours."""
    text = (
        f"{author_mention}, вибачте — зараз поза робочим часом менторів (Kyiv: {local_time_str}). "
        f"Ось швидка самодопомога: {_link(share_url)}\n\n"
        "Порада: опишіть коротко проблему й вставте фрагмент коду або очікуваний результат — "
        "це допоможе отримати швидку і точну відповідь від чату. 😊"
    )
    if on_duty_role_id:
        text += f"\n\nЧергові ментори: {role_mention(on_duty_role_id)}"
    return text


def compose_greeting(author_mention: str, share_url: Optional[str]) -> str:
    """Reply to a direct mention of the bot."""
    return (
        f"Привіт, {author_mention}! Я бот-помічник менторів. "
        "Згадайте роль менторів, якщо потрібна допомога, а поза робочим часом "
        f"скористайтеся самодопомогою: {_link(share_url)}"
    )


def compose_direct_message(share_url: Optional[str]) -> str:
    return (
        f"Привіт! Ваше питання помічено. Тимчасова самодопомога: {_link(share_url)}\n\n"
        "Якщо після цього залишаться питання — ментори дадуть відповідь у робочий час."
    )
