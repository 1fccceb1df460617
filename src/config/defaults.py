"""Defaults applied when a fresh queue state is created."""

TOTAL_DESKS = 20

DEFAULT_TIPS = [
    "Check your case regularly on the court website. Following its progress is your responsibility.",
    "Deadlines matter. Missing one can end your case, so keep an eye on every notice.",
    "Keep your contact details up to date and report any change of address, phone or e-mail.",
    "The first hearing is a conciliation attempt. Your attendance is mandatory.",
    "If the claimant misses the conciliation hearing, the case is archived.",
    "Bring the original documents that support your claim on the day of the hearing.",
    "Claims up to 20 minimum wages do not require a lawyer. Above that, one is mandatory.",
    "Official notices are published in the electronic court gazette or in the case system.",
    "The office may notify you by WhatsApp or e-mail if you authorize it. Leave your e-mail at the desk.",
    "Filing turns your complaint into a case. Ask at the desk if you need help with it.",
    "If the other party does not comply with the judgment, request its enforcement to start collection.",
    "Appealing a judgment requires a lawyer.",
    "If you cannot afford appeal costs, request legal aid and bring proof of need.",
    "Be clear and objective in your requests and statements, and stick to the relevant facts.",
    "Keep every piece of evidence: e-mails, invoices, contracts and message history.",
    "Many hearings are led by a lay judge who drafts a decision for the presiding judge to approve.",
    "Treat everyone with respect during hearings, including the other party, lawyers and staff.",
    "An agreement can solve your problem faster. Be open to negotiating.",
    "First-instance proceedings are free of charge. Costs apply only if you appeal.",
    "If you have questions about your case, ask at the service counter.",
]
