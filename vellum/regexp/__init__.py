"""Regular expression parsing and compilation into automata over UTF-8 encoded bytes."""