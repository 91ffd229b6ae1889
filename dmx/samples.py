"""Hand-authored sample patterns with known messages."""

SAMPLE_1 = (
    "                                               ",
    "                                               ",
    "                                               ",
    "     * * * * * * * * * * * * * * * * * * * * * ",
    "     *                                       * ",
    "     ****** **** ****** ******* ** *** *****   ",
    "     *     *    ****************************** ",
    "     * **    * *        **  *    * * *   *     ",
    "     *   *    *  *****    *   * *   *  **  *** ",
    "     *  **     * *** **   **  *    **  ***  *  ",
    "     ***  * **   **  *   ****    *  *  ** * ** ",
    "     *****  ***  *  * *   ** ** **  *   * *    ",
    "     ***************************************** ",
    "                                               ",
    "                                               ",
    "                                               ",
)

SAMPLE_2 = (
    "                                          ",
    "                                          ",
    "* * * * * * * * * * * * * * * * * * *     ",
    "*                                    *    ",
    "**** *** **   ***** ****   *********      ",
    "* ************ ************ **********    ",
    "** *      *    *  * * *         * *       ",
    "***   *  *           * **    *      **    ",
    "* ** * *  *   * * * **  *   ***   ***     ",
    "* *           **    *****  *   **   **    ",
    "****  *  * *  * **  ** *   ** *  * *      ",
    "**************************************    ",
    "                                          ",
    "                                          ",
    "                                          ",
    "                                          ",
)

SAMPLES = {
    "1": SAMPLE_1,
    "2": SAMPLE_2,
}

SAMPLE_MESSAGES = {
    "1": "CSUMB CSIT online program is top notch.",
    "2": "You did it!  Great work.  Celebrate.",
}

DEMO_MESSAGES = (
    "What a great resume builder this is!",
    "This was an amazing assignment!",
)
