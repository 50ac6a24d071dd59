from __future__ import annotations

from barberbot.domain.entities.style_catalog import StyleCatalogEntry

BUSINESS_HOURS_TEXT = "Seg a Sáb: 9h às 20h, Dom: 10h às 16h."
ADDRESS_TEXT = "Rua dos Cortes, 456, Bairro Estilo, Cidade."
BARBER_NAME = "Chocolate"

DATE_PROMPT = "Digite a data do agendamento (DD/MM/YYYY) ou 'sair' para voltar ao menu:"
TIME_PROMPT = "Digite o horário (ex.: 09:00) ou 'sair':"
NAME_PROMPT = "Digite seu nome ou 'sair' para voltar ao menu:"
CANCEL_PROMPT = "Digite seu nome e o horário (ex.: Joao 09:00) ou 'sair' para voltar ao menu:"
CANCEL_FORMAT_HINT = "Formato: [nome] [horário: HH:MM] (ex.: Joao 09:00) ou 'sair' para voltar ao menu:"
CANCEL_INVALID_FORMAT = (
    "Formato inválido. Use: [nome] [horário: HH:MM] (ex.: Joao 09:00) ou 'sair' para voltar ao menu:"
)
INVALID_DATE = "Formato inválido. Use: DD/MM/YYYY (ex.: 25/12/2025)\n\nDigite novamente ou 'sair':"
PAST_DATE = (
    "A data deve ser hoje ou futura. Não é possível agendar no passado.\n\n"
    "Digite outra data (DD/MM/YYYY) ou 'sair':"
)
INVALID_TIME = "Horário inválido. Use: HH:MM (ex.: 09:00)"
PRESENCE_REPROMPT = "Responda 'Sim' ou 'Não' para confirmar sua presença."
FAREWELL = "Bot encerrado. Até a próxima! 😎"
MEDIA_NOT_SUPPORTED = "Desculpe, só processamos mensagens de texto! 😅"
GENERIC_ERROR = "Ops, algo deu errado por aqui. Tente novamente."

SIDE_CHAT_WELCOME = (
    f"O {BARBER_NAME} foi solicitado, por favor, aguarde... ⏳\n"
    "Digite 'sair' a qualquer momento para finalizar o bate-papo e voltar ao menu."
)
SIDE_CHAT_EXIT = "Bate-papo encerrado. Voltando ao menu."
SIDE_CHAT_IDLE = "Inatividade detectada. Encerrando o bate-papo."


def build_menu() -> str:
    return (
        "E aí, qual é o plano? 😎\n"
        "1. Agendar um corte 📝\n"
        "2. Cancelar agendamento\n"
        "3. Ver agendamentos\n"
        "4. Horário da barbearia 🕛\n"
        "5. Onde fica? 🌎\n"
        f"6. Papo com o {BARBER_NAME} 🗣️\n"
        "7. Sair"
    )


def with_menu(text: str) -> str:
    return f"{text}\n\n{build_menu()}"


def booking_error(reason: str) -> str:
    return f"Erro: {reason}. Tente novamente.\n\n{DATE_PROMPT}"


def booking_conflict() -> str:
    return f"Horário já agendado. Escolha outro horário.\n\n{DATE_PROMPT}"


def booking_save_error() -> str:
    return f"Erro ao salvar agendamento.\n\n{DATE_PROMPT}"


def booking_limit(limit: int) -> str:
    return with_menu(f"Você atingiu o limite de {limit} agendamentos. Cancele um para agendar novamente.")


def booking_confirmation(name: str, date_iso: str, time: str) -> str:
    return (
        "*Agendamento Confirmado! 🎉*\n"
        f"Nome: {name}\n"
        f"Data: {date_iso}\n"
        f"Hora: {time}\n"
        f"Endereço: {ADDRESS_TEXT}\n\n"
        "Chegue 5 minutos antes! Qualquer dúvida, é só chamar."
    )


def style_suggestion(entry: StyleCatalogEntry) -> str:
    return with_menu(
        f"Sugerimos o *{entry.suggestion}* com o barbeiro {entry.barber} (R${entry.price}). 😎 "
        "Deseja agendar? Digite 1 para iniciar."
    )


def report_summary(active_count: int, cancelled_count: int) -> str:
    return with_menu(f"Relatório: {active_count} agendamentos ativos, {cancelled_count} cancelados.")


def same_day_reminder(name: str, time: str) -> str:
    return f"Lembrete: {name}, seu corte é hoje às {time}! 😎"


def next_day_reminder(name: str, date_iso: str, time: str) -> str:
    return f"Lembrete: {name}, seu corte é amanhã ({date_iso}) às {time}! Confirme com 'Sim' ou 'Não'."
