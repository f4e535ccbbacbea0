"""
JavaScript evaluated inside the page.

Each script is a pure function of the DOM and its argument and returns only
serializable data; all decisions are taken in Python.
"""

# Element records for the candidate scorer. Elements below the floor or above
# the wrapper fan-out are dropped here to keep the payload small; the scorer
# applies the same filters again.
SNAPSHOT_SCRIPT = """
(opts) => {
    const floor = opts.floor || 0;
    const fanout = opts.fanout || 10;
    const containerTags = (opts.tags || ['DIV']).map(t => t.toUpperCase());
    const platformAttrs = opts.attributes || [];
    const records = [];

    function structuralPath(el) {
        const parts = [];
        let current = el;
        while (current && current !== document.body && current.parentElement) {
            const tag = current.tagName.toLowerCase();
            let index = 1;
            let sibling = current.previousElementSibling;
            while (sibling) {
                if (sibling.tagName === current.tagName) index++;
                sibling = sibling.previousElementSibling;
            }
            parts.unshift(`${tag}:nth-of-type(${index})`);
            current = current.parentElement;
        }
        parts.unshift('body');
        return parts.join(' > ');
    }

    const selector = containerTags.map(t => t.toLowerCase()).join(', ');
    document.querySelectorAll(selector).forEach(el => {
        const text = el.textContent || '';
        if (text.length < floor) return;

        const childContainers = Array.from(el.children)
            .filter(child => containerTags.includes(child.tagName)).length;
        if (childContainers > fanout) return;

        const attributes = {};
        for (const name of platformAttrs) {
            const value = el.getAttribute(name);
            if (value) attributes[name] = value;
        }

        const tag = el.tagName.toLowerCase();
        const classes = (typeof el.className === 'string' ? el.className : '')
            .split(/\\s+/).filter(c => c.length > 0);

        // Document-wide match counts for tag.class[attr] and tag[attr], keyed by
        // class ('' for the attribute alone), so Python can tell a unique selector.
        const attrName = platformAttrs.find(name => attributes[name]);
        const attrSel = attrName ? `[${attrName}="${CSS.escape(attributes[attrName])}"]` : '';
        const countMatches = (sel) => {
            try {
                return document.querySelectorAll(sel).length;
            } catch (e) {
                return 0;
            }
        };
        const selectorMatches = {};
        if (attrSel) selectorMatches[''] = countMatches(tag + attrSel);
        for (const cls of classes) {
            selectorMatches[cls] = countMatches(`${tag}.${CSS.escape(cls)}${attrSel}`);
        }

        let idUnique = false;
        if (el.id) {
            try {
                idUnique = document.querySelectorAll(`[id="${CSS.escape(el.id)}"]`).length === 1;
            } catch (e) {
                idUnique = false;
            }
        }

        records.push({
            tag: tag,
            id: el.id || '',
            idUnique: idUnique,
            classes: classes,
            selectorMatches: selectorMatches,
            attributes: attributes,
            childContainers: childContainers,
            path: structuralPath(el),
            text: text,
        });
    });
    return records;
}
"""

READ_REGION_TEXT_SCRIPT = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return '';
    return (el.textContent || '').trim();
}
"""

# Reads a container with <script>/<style> removed from a detached clone so the
# live DOM is left untouched, plus the outbound links inside it.
READ_CONTAINER_SCRIPT = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return null;
    const clone = el.cloneNode(true);
    clone.querySelectorAll('script, style, noscript').forEach(node => node.remove());
    const links = Array.from(el.querySelectorAll('a[href]')).map(a => ({
        href: a.href || '',
        text: (a.textContent || '').trim(),
        label: a.getAttribute('aria-label') || '',
    }));
    return {
        text: (clone.textContent || '').trim(),
        links: links,
    };
}
"""

# Hides the most common automation tells before any page script runs.
STEALTH_INIT_SCRIPT = """
(() => {
    try { delete Object.getPrototypeOf(navigator).webdriver; } catch (e) {}
    window.chrome = window.chrome || { runtime: {} };
})();
"""
