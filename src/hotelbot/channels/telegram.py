"""
Front desk Telegram bot.

Staff commands map one-to-one onto the guest tools; free text goes to an
LLM agent bound to the same tools when a Groq key is configured.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_groq import ChatGroq
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from hotelbot.config import get_config
from hotelbot.exceptions import ChannelError
from hotelbot.prompts import get_system_prompt
from hotelbot.tools import (
    check_out_guest,
    get_guest_details,
    get_tool_map,
    get_tools,
    list_available_rooms,
    list_guests,
    register_guest,
    update_guest_details,
)

logger = logging.getLogger(__name__)

LLM_CALL_TIMEOUT = 30
MAX_TOOL_ROUNDS = 5
MAX_HISTORY_MESSAGES = 10
AGENT_GAVE_UP_REPLY = "I could not finish that request. Please try again with more detail."
INT_ARGUMENTS = ("guest_id", "new_guest_id", "room")

CHECKIN_USAGE = "Usage: /checkin <guest id> <room> <email> <Credit|Cash|Pix> <full name>"
UPDATE_USAGE = "Usage: /update <guest id> field=value ... (fields: id, name, email, payment, room)"

UPDATE_FIELDS = {
    "id": "new_guest_id",
    "name": "name",
    "email": "email",
    "payment": "payment_method",
    "room": "room",
}

HELP_TEXT = (
    "Front desk commands:\n"
    "/rooms - free rooms\n"
    "/guests - checked-in guests\n"
    "/guest <id> - guest details\n"
    f"{CHECKIN_USAGE.replace('Usage: ', '')}\n"
    f"{UPDATE_USAGE.replace('Usage: ', '')}\n"
    "/checkout <id> - check a guest out"
)

_llm: Optional[ChatGroq] = None


# ------------------------------------
# Command argument parsing
# ------------------------------------

def parse_checkin_args(args: List[str]) -> Dict[str, Any]:
    """`/checkin 123456789 5 ana@x.com pix Ana Souza` -> register_guest kwargs."""
    if len(args) < 5:
        raise ValueError(CHECKIN_USAGE)
    guest_id, room, email, payment = args[:4]
    return {
        "guest_id": guest_id,
        "room": room,
        "email": email,
        "payment_method": payment,
        "name": " ".join(args[4:]),
    }


def parse_update_args(args: List[str]) -> Tuple[str, Dict[str, str]]:
    """
    `/update 123456789 name=Ana Maria room=7` -> ("123456789", {"name": "Ana Maria", "room": "7"}).
    Words without '=' belong to the previous field's value.
    """
    if len(args) < 2:
        raise ValueError(UPDATE_USAGE)

    guest_id, tokens = args[0], args[1:]
    fields: Dict[str, str] = {}
    current: Optional[str] = None
    for token in tokens:
        if "=" in token:
            key, value = token.split("=", 1)
            target = UPDATE_FIELDS.get(key.strip().lower())
            if target is None:
                raise ValueError(f"Unknown field '{key}'. {UPDATE_USAGE}")
            fields[target] = value
            current = target
        elif current is not None:
            fields[current] = f"{fields[current]} {token}".strip()
        else:
            raise ValueError(UPDATE_USAGE)
    return guest_id, fields


# ------------------------------------
# Helpers
# ------------------------------------

def escape_markdown_v2(text: str) -> str:
    """Escapes MarkdownV2 special characters; tool '**bold**' becomes '*bold*'."""
    if text is None:
        return ""
    clean_text = re.sub(r'<function=.*?>.*?</function>', '', str(text)).replace("**", "*")
    escape_chars = r'_[]()~`>#+-=|{}.!'
    return re.sub(f'([{re.escape(escape_chars)}])', r'\\\1', clean_text)


async def _reply(update: Update, text: str) -> None:
    await update.message.reply_text(escape_markdown_v2(text), parse_mode='MarkdownV2')


def get_llm() -> ChatGroq:
    global _llm
    if _llm is None:
        config = get_config()
        _llm = ChatGroq(
            model=config.get_groq_model(),
            groq_api_key=config.get_groq_api_key(),
            temperature=0.1,
            timeout=config.get_llm_timeout() or LLM_CALL_TIMEOUT,
        )
    return _llm


def _coerce_int_arguments(args: Dict[str, Any]) -> Dict[str, Any]:
    # Groq sometimes sends numbers as quoted or markdown-wrapped strings
    for key in INT_ARGUMENTS:
        if key in args and isinstance(args[key], str):
            try:
                args[key] = int(re.sub(r'[\*\_\s]', '', args[key]))
            except ValueError:
                logger.warning(f"Argument {key} could not be cast to int: {args[key]}")
    return args


def _prepare_history(context: ContextTypes.DEFAULT_TYPE) -> List[Any]:
    history = context.user_data.get("history")
    if history is None:
        history = [SystemMessage(content=get_system_prompt())]
        context.user_data["history"] = history
    return history


def _trim_history(history: List[Any], max_messages: int = MAX_HISTORY_MESSAGES) -> List[Any]:
    """
    Keeps the system prompt plus the most recent turns.
    The kept slice always starts at a HumanMessage so no ToolMessage loses its AIMessage.
    """
    system, rest = history[0], history[1:]
    human_positions = [i for i, message in enumerate(rest) if isinstance(message, HumanMessage)]
    if not human_positions:
        return [system]

    window_start = max(len(rest) - (max_messages - 1), 0)
    in_window = [i for i in human_positions if i >= window_start]
    start = in_window[0] if in_window else human_positions[-1]
    return [system] + rest[start:]


# ------------------------------------
# Agent loop
# ------------------------------------

async def handle_message_with_agent(user_message: str, context: ContextTypes.DEFAULT_TYPE) -> str:
    history = _prepare_history(context)
    llm_with_tools = get_llm().bind_tools(get_tools())

    history.append(HumanMessage(content=user_message))

    for _ in range(MAX_TOOL_ROUNDS):
        ai_message = await llm_with_tools.ainvoke(history)
        history.append(ai_message)

        if not ai_message.tool_calls:
            context.user_data["history"] = _trim_history(history)
            return str(ai_message.content)

        for tool_call in ai_message.tool_calls:
            tool_name = tool_call["name"]
            args = _coerce_int_arguments(dict(tool_call["args"]))

            structured_tool = get_tool_map().get(tool_name)
            if structured_tool is None:
                history.append(ToolMessage(content=f"Error: Tool {tool_name} not found", tool_call_id=tool_call["id"]))
                continue
            try:
                result = await structured_tool.ainvoke(args)
                history.append(ToolMessage(content=str(result), tool_call_id=tool_call["id"]))
            except Exception as e:
                logger.error(f"Tool Error ({tool_name}): {e}")
                history.append(ToolMessage(content=f"Error: {e}", tool_call_id=tool_call["id"]))

    logger.warning(f"Agent stopped after {MAX_TOOL_ROUNDS} tool rounds without a final answer.")
    history.append(AIMessage(content=AGENT_GAVE_UP_REPLY))
    context.user_data["history"] = _trim_history(history)
    return AGENT_GAVE_UP_REPLY


# ------------------------------------
# Telegram handlers
# ------------------------------------

async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    hotel = get_config().get_hotel_display_name()
    context.user_data["history"] = [SystemMessage(content=get_system_prompt())]
    await _reply(update, f"🏨 Welcome to the {hotel} front desk.\n\n{HELP_TEXT}")


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    await _reply(update, HELP_TEXT)


async def rooms_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    await _reply(update, list_available_rooms())


async def guests_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    await _reply(update, list_guests())


async def guest_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    if len(context.args) != 1:
        await _reply(update, "Usage: /guest <guest id>")
        return
    await _reply(update, get_guest_details(context.args[0]))


async def checkin_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    try:
        kwargs = parse_checkin_args(context.args)
    except ValueError as e:
        await _reply(update, str(e))
        return
    await _reply(update, register_guest(**kwargs))


async def update_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    try:
        guest_id, fields = parse_update_args(context.args)
    except ValueError as e:
        await _reply(update, str(e))
        return
    await _reply(update, update_guest_details(guest_id, **fields))


async def checkout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message:
        return
    if len(context.args) != 1:
        await _reply(update, "Usage: /checkout <guest id>")
        return
    await _reply(update, check_out_guest(context.args[0]))


async def message_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message or not update.message.text:
        return

    if not get_config().get_groq_api_key():
        await _reply(update, HELP_TEXT)
        return

    chat_id = update.effective_chat.id
    await context.bot.send_chat_action(chat_id=chat_id, action="typing")
    try:
        response = await handle_message_with_agent(update.message.text, context)
        await _reply(update, response)
    except Exception as e:
        logger.error(f"Telegram handler error: {e}", exc_info=True)
        await _reply(update, "⚠️ Sorry, I could not process that request. Please try again.")


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error(f"Unhandled Telegram error: {context.error}", exc_info=context.error)


def create_telegram_app() -> Application:
    config = get_config()
    token = config.get_telegram_bot_token()
    if not token:
        raise ChannelError("TELEGRAM_BOT_TOKEN is missing!")

    app = Application.builder().token(token).build()
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("rooms", rooms_command))
    app.add_handler(CommandHandler("guests", guests_command))
    app.add_handler(CommandHandler("guest", guest_command))
    app.add_handler(CommandHandler("checkin", checkin_command))
    app.add_handler(CommandHandler("update", update_command))
    app.add_handler(CommandHandler("checkout", checkout_command))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, message_handler))
    app.add_error_handler(error_handler)
    return app


async def run_telegram_bot(application: Application) -> None:
    logger.info("Front desk bot (Telegram) starting...")
    await application.initialize()
    await application.start()
    await application.updater.start_polling(drop_pending_updates=True)

    try:
        await asyncio.Event().wait()
    except (asyncio.CancelledError, KeyboardInterrupt):
        await application.updater.stop()
        await application.stop()
        await application.shutdown()
