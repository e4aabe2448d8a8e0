"""Pure NF-e import domain: document, plan and outcome types; validators."""
