"""Server-rendered HTML pages."""

from __future__ import annotations

import json
from html import escape
from typing import Any

from alliswell.domain.reference_data import (
    ASSESSMENT_BANDS,
    ASSESSMENT_QUESTIONS,
    CRISIS_RESOURCES,
    CRISIS_SUPPORT_MESSAGE,
)

SITE_NAME = "ALL IS WELL"


def _json_for_script(value: Any) -> str:
    # Keep embedded JSON from closing the surrounding <script> element
    return json.dumps(value).replace("</", "<\\/")


def layout(
    title: str,
    body: str,
    *,
    is_logged_in: bool = False,
    flash_message: str | None = None,
    page_class: str = "",
) -> str:
    if is_logged_in:
        account_links = '<a href="/logout">Log out</a>'
    else:
        account_links = '<a href="/login">Log in</a> <a href="/signup">Sign up</a>'

    flash_html = ""
    if flash_message:
        flash_html = f'<div class="flash" role="alert">{escape(flash_message)}</div>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{escape(title)}</title>
</head>
<body class="{escape(page_class)}">
  <header>
    <nav aria-label="Main">
      <a href="/">{SITE_NAME}</a>
      <a href="/assessment">Wellness check</a>
      <a href="/chat">Support chat</a>
      {account_links}
    </nav>
  </header>
  {flash_html}
  <main id="main">
{body}
  </main>
  <div id="announcements" class="visually-hidden" aria-live="polite"></div>
</body>
</html>
"""


def _crisis_resources_html() -> str:
    items = "".join(
        f"<li><strong>{escape(item['name'])}</strong>: {escape(item['contact'])}. "
        f"{escape(item['description'])}</li>"
        for item in CRISIS_RESOURCES
    )
    return f"<ul>{items}</ul>"


_INDEX_SCRIPT = """
(function () {
  var cfg = JSON.parse(document.getElementById('app-config').textContent);
  var history = [];
  var messages = document.getElementById('chat-messages');

  function addMessage(text, role) {
    var p = document.createElement('p');
    p.className = 'chat-message ' + role + '-message';
    p.textContent = text;
    messages.appendChild(p);
  }

  function showCrisisModal() {
    var modal = document.getElementById('crisis-modal');
    modal.hidden = false;
    modal.querySelector('h2').focus();
  }

  function isCrisis(text) {
    var lower = text.toLowerCase();
    return cfg.crisisPhrases.some(function (p) { return lower.indexOf(p) !== -1; });
  }

  document.getElementById('chat-form').addEventListener('submit', async function (e) {
    e.preventDefault();
    var input = document.getElementById('chat-input');
    var text = input.value.trim();
    if (!text) return;
    addMessage(text, 'user');
    input.value = '';
    // Crisis check runs before any network request
    if (isCrisis(text)) {
      showCrisisModal();
      addMessage(cfg.crisisMessage, 'assistant');
      return;
    }
    try {
      var res = await fetch('/api/chat', {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify({message: text, history: history})
      });
      var data = await res.json();
      if (!res.ok || !data.success) throw new Error(data.error || 'Server error');
      addMessage(data.message, 'assistant');
      if (data.crisis) {
        showCrisisModal();
        return;
      }
      // Only clear exchanges are replayed to the relay
      history.push({role: 'user', text: text}, {role: 'assistant', text: data.message});
    } catch (err) {
      var p = document.createElement('p');
      p.className = 'chat-message error-message';
      p.textContent = 'An error occurred. Please try again.';
      messages.appendChild(p);
    }
  });

  document.getElementById('assessment-form').addEventListener('submit', async function (e) {
    e.preventDefault();
    var responses = cfg.questions.map(function (q) {
      var picked = document.querySelector('input[name="q' + q.id + '"]:checked');
      return picked ? {value: parseInt(picked.value, 10)} : null;
    });
    if (responses.indexOf(null) !== -1) return;
    var score = responses.reduce(function (sum, r) { return sum + r.value; }, 0);
    var band = cfg.bands.find(function (b) { return b.max_score === null || score <= b.max_score; });
    var out = document.getElementById('assessment-results');
    out.hidden = false;
    out.querySelector('.score').textContent = score + ' / ' + cfg.maxScore;
    out.querySelector('.category').textContent = band.category;
    out.querySelector('.description').textContent = band.description;
    var list = out.querySelector('.suggestions');
    list.innerHTML = '';
    band.suggestions.forEach(function (s) {
      var li = document.createElement('li'); li.textContent = s; list.appendChild(li);
    });
    if (!cfg.loggedIn) return;
    await fetch('/api/assessment', {
      method: 'POST',
      headers: {'Content-Type': 'application/json'},
      body: JSON.stringify({responses: responses, score: score, category: band.category,
                            timestamp: new Date().toISOString()})
    });
  });

  var params = new URLSearchParams(window.location.search);
  if (params.get('openChat') === 'true') document.getElementById('chat-panel').hidden = false;
  if (params.get('openAssessment') === 'true') document.getElementById('assessment-panel').hidden = false;
})();
"""


def _question_html(question: dict[str, Any]) -> str:
    options = "".join(
        f'<label><input type="radio" name="q{question["id"]}" value="{option["value"]}" required> '
        f"{escape(str(option['text']))}</label>"
        for option in question["options"]
    )
    return (
        f'<fieldset><legend>{escape(str(question["text"]))}</legend>{options}</fieldset>'
    )


def index_page(
    *,
    is_logged_in: bool,
    crisis_phrases: tuple[str, ...],
    max_score: int,
    flash_message: str | None = None,
) -> str:
    config = {
        "loggedIn": is_logged_in,
        "crisisPhrases": [phrase.lower() for phrase in crisis_phrases],
        "crisisMessage": CRISIS_SUPPORT_MESSAGE,
        "questions": ASSESSMENT_QUESTIONS,
        "bands": ASSESSMENT_BANDS,
        "maxScore": max_score,
    }

    if is_logged_in:
        chat_body = """
      <div id="chat-messages" aria-live="polite"></div>
      <form id="chat-form">
        <label for="chat-input">Message</label>
        <input id="chat-input" name="message" autocomplete="off">
        <button type="submit">Send</button>
      </form>"""
    else:
        chat_body = """
      <div id="chat-messages"></div>
      <form id="chat-form" hidden><input id="chat-input"></form>
      <p><a href="/login">Log in</a> to talk with our support assistant.</p>"""

    questions = "".join(_question_html(question) for question in ASSESSMENT_QUESTIONS)

    body = f"""
    <section class="hero">
      <h1>{SITE_NAME}</h1>
      <p>Small steps, kind words, and support when you need it.</p>
    </section>
    <section id="assessment-panel" aria-labelledby="assessment-title" hidden>
      <h2 id="assessment-title">Wellness check</h2>
      <form id="assessment-form">{questions}<button type="submit">Finish</button></form>
      <div id="assessment-results" hidden>
        <p>Your score: <span class="score"></span></p>
        <h3 class="category"></h3>
        <p class="description"></p>
        <ul class="suggestions"></ul>
        <p><strong>Important:</strong> This assessment is for self-reflection only and is not a
        diagnostic tool. If you're in crisis, please contact emergency services or a crisis
        helpline immediately.</p>
      </div>
    </section>
    <section id="chat-panel" aria-labelledby="chat-title" hidden>
      <h2 id="chat-title">Support chat</h2>{chat_body}
    </section>
    <div id="crisis-modal" role="dialog" aria-labelledby="crisis-title" hidden>
      <h2 id="crisis-title" tabindex="-1">You are not alone</h2>
      <p>If you are thinking about harming yourself, please reach out right now.</p>
      {_crisis_resources_html()}
    </div>
    <script id="app-config" type="application/json">{_json_for_script(config)}</script>
    <script>{_INDEX_SCRIPT}</script>"""

    return layout(
        f"{SITE_NAME} - Mental Wellness App",
        body,
        is_logged_in=is_logged_in,
        flash_message=flash_message,
        page_class="homepage",
    )


def login_page(flash_message: str | None = None) -> str:
    body = """
    <h1>Log in</h1>
    <form method="post" action="/login">
      <label for="name">Name</label>
      <input id="name" name="name" required autocomplete="username">
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required autocomplete="current-password">
      <button type="submit">Log in</button>
    </form>
    <p>New here? <a href="/signup">Create an account</a>.</p>"""
    return layout("Login", body, flash_message=flash_message)


def signup_page(flash_message: str | None = None) -> str:
    body = """
    <h1>Sign up</h1>
    <form method="post" action="/register">
      <label for="name">Name</label>
      <input id="name" name="name" required maxlength="64" autocomplete="username">
      <label for="email">Email</label>
      <input id="email" name="email" type="email" required autocomplete="email">
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required minlength="8"
             autocomplete="new-password">
      <button type="submit">Create account</button>
    </form>
    <p>Already registered? <a href="/login">Log in</a>.</p>"""
    return layout("Sign Up", body, flash_message=flash_message)


def error_page(detail: str | None = None, *, is_logged_in: bool = False) -> str:
    message = escape(detail) if detail else "Something went wrong"
    body = f"""
    <h1>Something went wrong</h1>
    <p>{message}</p>
    <p><a href="/">Return home</a></p>"""
    return layout(f"Error - {SITE_NAME}", body, is_logged_in=is_logged_in)


def not_found_page() -> str:
    body = """
    <h1>404</h1>
    <p>Page not found</p>
    <p><a href="/">Return home</a></p>"""
    return layout(f"404 - {SITE_NAME}", body)
