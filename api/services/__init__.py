"""In-process services holding open editor sessions and wizards."""
