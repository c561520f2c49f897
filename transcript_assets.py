"""Static style and behaviour assets inlined into every rendered transcript page."""
from __future__ import annotations

STYLES = """
:root {
  color-scheme: light;
  font-family: 'Inter', system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
  --bg: #f8fafc;
  --card-bg: #ffffff;
  --border-soft: rgba(148, 163, 184, 0.45);
  --text-primary: #0f172a;
  --text-secondary: #475569;
  --user: #2563eb;
  --assistant: #334155;
  --thinking: #7c3aed;
  --tool: #f97316;
  --warning: #d97706;
  --sidebar-width: 280px;
}

body {
  margin: 0;
  background: var(--bg);
  color: var(--text-primary);
}

.sidebar {
  position: fixed;
  top: 0;
  left: 0;
  bottom: 0;
  width: var(--sidebar-width);
  overflow-y: auto;
  background: #f1f5f9;
  border-right: 1px solid var(--border-soft);
  padding: 16px 12px;
  box-sizing: border-box;
}

.toc-item {
  display: flex;
  gap: 10px;
  padding: 8px 10px;
  border-radius: 10px;
  cursor: pointer;
}

.toc-item:hover { background: rgba(37, 99, 235, 0.08); }
.toc-item.active { background: rgba(37, 99, 235, 0.16); }

.toc-number {
  font-weight: 700;
  color: var(--user);
  min-width: 32px;
}

.toc-preview {
  font-size: 0.88rem;
  word-break: break-word;
}

.toc-timestamp {
  font-size: 0.72rem;
  color: var(--text-secondary);
  margin-top: 2px;
}

.container {
  margin-left: var(--sidebar-width);
  padding: 32px 40px 96px;
  max-width: 980px;
}

.header h1 {
  margin: 0 0 12px;
  font-size: 1.8rem;
}

.session-info {
  font-size: 0.85rem;
  color: var(--text-secondary);
  display: flex;
  flex-direction: column;
  gap: 2px;
}

.messages {
  margin-top: 32px;
  display: flex;
  flex-direction: column;
  gap: 14px;
}

.message-divider {
  margin-top: 24px;
  text-align: center;
  font-weight: 700;
  color: var(--text-secondary);
  border-top: 1px solid var(--border-soft);
  padding-top: 8px;
}

.message-group {
  display: flex;
  flex-direction: column;
  gap: 4px;
}

.message-group.user { align-items: flex-end; }

.timestamp-label {
  font-size: 0.72rem;
  color: var(--text-secondary);
}

.message {
  border-radius: 14px;
  padding: 14px 18px;
  border: 1px solid var(--border-soft);
  background: var(--card-bg);
  max-width: 100%;
  box-sizing: border-box;
}

.user-message {
  background: rgba(37, 99, 235, 0.08);
  border-color: rgba(37, 99, 235, 0.35);
  scroll-margin-top: 24px;
}

.assistant-message { border-left: 4px solid var(--assistant); }

.message-content {
  white-space: pre-wrap;
  word-break: break-word;
  line-height: 1.55;
}

.message-content.markdown { white-space: normal; }
.markdown p { margin: 0 0 0.8rem; }
.markdown p:last-child { margin-bottom: 0; }
.markdown code {
  font-family: 'JetBrains Mono', 'SFMono-Regular', Menlo, Consolas, monospace;
  background: rgba(15, 23, 42, 0.08);
  padding: 0.1rem 0.3rem;
  border-radius: 4px;
}
.markdown pre code {
  display: block;
  background: #0f172a;
  color: #f8fafc;
  padding: 12px 14px;
  overflow-x: auto;
}

.message-navigation {
  display: flex;
  justify-content: flex-end;
  gap: 6px;
  margin-top: 6px;
}

.nav-btn, .meta-btn, .toggle-btn {
  border: 1px solid var(--border-soft);
  background: #ffffff;
  border-radius: 8px;
  padding: 2px 8px;
  cursor: pointer;
  font-size: 0.85rem;
}

.thinking-section {
  border-left: 4px solid var(--thinking);
  padding: 6px 12px;
}

.thinking-content pre, .session-continuation-content pre {
  white-space: pre-wrap;
  word-break: break-word;
  font-size: 0.85rem;
  color: var(--text-secondary);
}

.thinking-separator {
  border: none;
  border-top: 1px dashed var(--border-soft);
}

.tools-section {
  border-left: 4px solid var(--tool);
  padding: 6px 12px;
  display: flex;
  flex-wrap: wrap;
  gap: 6px;
  align-items: flex-start;
}

.tool-item {
  display: inline-block;
  cursor: pointer;
  background: rgba(249, 115, 22, 0.1);
  border: 1px solid rgba(249, 115, 22, 0.35);
  border-radius: 8px;
  padding: 2px 8px;
  font-size: 0.85rem;
}

.tool-details {
  margin-top: 8px;
  cursor: auto;
  max-width: 640px;
}

.tool-section-title {
  font-weight: 600;
  font-size: 0.78rem;
  margin: 6px 0 2px;
}

.tool-input, .tool-result {
  background: #0f172a;
  color: #f8fafc;
  border-radius: 8px;
  padding: 10px 12px;
  overflow-x: auto;
  white-space: pre-wrap;
  word-break: break-word;
  font-size: 0.8rem;
}

.tool-result.error { background: #7f1d1d; }

.session-continuation-message {
  border-color: rgba(217, 119, 6, 0.5);
  background: rgba(217, 119, 6, 0.08);
}

.session-continuation-header {
  display: flex;
  gap: 8px;
  align-items: center;
  font-weight: 700;
}

.session-continuation-header .timestamp {
  margin-left: auto;
  font-weight: 400;
  font-size: 0.75rem;
  color: var(--text-secondary);
}

.session-continuation-notice {
  margin: 8px 0;
  font-size: 0.9rem;
}

.scroll-top-btn {
  position: fixed;
  right: 24px;
  bottom: 24px;
  border: none;
  border-radius: 999px;
  padding: 8px 14px;
  background: var(--user);
  color: #ffffff;
  cursor: pointer;
  opacity: 0;
  pointer-events: none;
  transition: opacity 0.2s ease;
}

.scroll-top-btn.show {
  opacity: 1;
  pointer-events: auto;
}

@media (max-width: 860px) {
  .sidebar { display: none; }
  .container { margin-left: 0; padding: 20px 16px 64px; }
}
"""

SCRIPT = """
function toggleThinking(button) {
  const thinkingContent = button.nextElementSibling;
  if (thinkingContent && thinkingContent.classList.contains('thinking-content')) {
    if (thinkingContent.style.display === 'none') {
      thinkingContent.style.display = 'block';
      button.textContent = '\U0001F9E0 ×';
    } else {
      thinkingContent.style.display = 'none';
      button.textContent = '\U0001F9E0 ...';
    }
  }
}

function toggleSessionSummary(button) {
  const summaryContent = button.parentElement.nextElementSibling;
  if (summaryContent && summaryContent.classList.contains('session-continuation-content')) {
    if (summaryContent.style.display === 'none') {
      summaryContent.style.display = 'block';
      button.textContent = '\U0001F4CB Hide conversation summary';
    } else {
      summaryContent.style.display = 'none';
      button.textContent = '\U0001F4CB View conversation summary';
    }
  }
}

function toggleToolDetails(event) {
  const toolItem = event.currentTarget;
  const toolDetails = toolItem.querySelector('.tool-details');
  if (event.target.closest('.tool-details')) {
    return;
  }
  event.stopPropagation();

  if (toolDetails) {
    document.querySelectorAll('.tool-details').forEach(details => {
      if (details !== toolDetails && details.style.display === 'block') {
        details.style.display = 'none';
      }
    });
    toolDetails.style.display = toolDetails.style.display === 'none' ? 'block' : 'none';
  }
}

function scrollToMessage(messageId) {
  const element = document.getElementById(messageId);
  if (element) {
    element.scrollIntoView({ behavior: 'smooth', block: 'start' });
    element.style.backgroundColor = '#fffacd';
    setTimeout(() => {
      element.style.backgroundColor = '';
      element.style.transition = 'background-color 1s ease';
    }, 100);
    setTimeout(() => {
      element.style.transition = '';
    }, 1100);
    setTimeout(updateActiveTocItem, 500);
  }
}

function jumpToMessage(button, direction) {
  const currentMessage = button.closest('.user-message');
  const match = currentMessage.id.match(/user-msg-(\\d+)/);
  if (match) {
    const currentIndex = parseInt(match[1], 10);
    const targetIndex = direction === 'prev' ? currentIndex - 1 : currentIndex + 1;
    scrollToMessage(`user-msg-${targetIndex}`);
  }
}

function scrollToTop() {
  window.scrollTo({ top: 0, behavior: 'smooth' });
}

function updateActiveTocItem() {
  const userMessages = document.querySelectorAll('.user-message');
  const tocItems = document.querySelectorAll('.toc-item');
  const scrollPosition = window.scrollY + 100;
  let activeIndex = -1;

  for (let i = userMessages.length - 1; i >= 0; i--) {
    const message = userMessages[i];
    if (message.offsetTop <= scrollPosition) {
      const match = message.id.match(/user-msg-(\\d+)/);
      if (match) {
        activeIndex = parseInt(match[1], 10);
      }
      break;
    }
  }

  tocItems.forEach((item, index) => {
    item.classList.toggle('active', index === activeIndex);
  });
}

let scrollTimeout;
window.addEventListener('scroll', function() {
  const scrollTopBtn = document.getElementById('scrollTopBtn');
  if (scrollTopBtn) {
    scrollTopBtn.classList.toggle('show', window.scrollY > 300);
  }
  clearTimeout(scrollTimeout);
  scrollTimeout = setTimeout(updateActiveTocItem, 50);
});

document.addEventListener('DOMContentLoaded', updateActiveTocItem);
"""
